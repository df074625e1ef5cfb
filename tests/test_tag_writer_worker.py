"""Tests for TagWriterWorker"""

import pyexiv2  # noqa: F401  # Must be first to avoid Windows crash with pyexiv2

from unittest.mock import Mock
from PyQt6.QtCore import QObject

from core.tag_commands import TagCommand, TagCommandKind
from core.tag_state import TagItem
from core.xmp_tag_store import TagPersistenceError
from workers.tag_writer_worker import TagWriterWorker


def _command(kind=TagCommandKind.ADD, tag="user:beach"):
    return TagCommand(kind, ("/photos/a.jpg",), tag, TagItem("beach", True))


class TestTagWriterWorker:
    """Test suite for TagWriterWorker"""

    def test_worker_initialization(self):
        store = Mock()
        worker = TagWriterWorker(store)
        assert isinstance(worker, QObject)
        assert worker.store is store

    def test_add_command_success(self):
        store = Mock()
        worker = TagWriterWorker(store)
        finished_mock = Mock()
        done_mock = Mock()
        worker.command_finished.connect(finished_mock)
        worker.finished.connect(done_mock)

        command = _command()
        worker.execute(command)

        store.add_tag.assert_called_once_with(["/photos/a.jpg"], "user:beach")
        store.remove_tag.assert_not_called()
        finished_mock.assert_called_once_with(command, True, "")
        done_mock.assert_called_once()

    def test_remove_command_success(self):
        store = Mock()
        worker = TagWriterWorker(store)
        finished_mock = Mock()
        worker.command_finished.connect(finished_mock)

        command = _command(TagCommandKind.REMOVE)
        worker.execute(command)

        store.remove_tag.assert_called_once_with(["/photos/a.jpg"], "user:beach")
        finished_mock.assert_called_once_with(command, True, "")

    def test_persistence_failure_reported(self):
        store = Mock()
        store.add_tag.side_effect = TagPersistenceError("read-only file")
        worker = TagWriterWorker(store)
        finished_mock = Mock()
        done_mock = Mock()
        worker.command_finished.connect(finished_mock)
        worker.finished.connect(done_mock)

        command = _command()
        worker.execute(command)

        finished_mock.assert_called_once_with(command, False, "read-only file")
        done_mock.assert_called_once()

    def test_unexpected_error_reported(self):
        store = Mock()
        store.remove_tag.side_effect = RuntimeError("boom")
        worker = TagWriterWorker(store)
        finished_mock = Mock()
        worker.command_finished.connect(finished_mock)

        worker.execute(_command(TagCommandKind.REMOVE))

        args = finished_mock.call_args[0]
        assert args[1] is False
        assert args[2] == "boom"
