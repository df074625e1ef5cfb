import logging

from core.tag_state import (
    DerivedTagView,
    TagItem,
    derive_tag_view,
    normalize_tag_input,
    replace_color_label,
    to_raw_tag,
)


def test_color_label_and_sorted_tags():
    view = derive_tag_view(["color:red", "user:beach", "flagged"])
    assert view.color_label == "red"
    assert view.tags == (TagItem("beach", True), TagItem("flagged", False))


def test_no_color_label():
    view = derive_tag_view(["landscape"])
    assert view.color_label is None
    assert view.tags == (TagItem("landscape", False),)


def test_empty_color_suffix_is_no_label():
    assert derive_tag_view(["color:"]).color_label is None


def test_first_color_wins_and_all_color_entries_excluded(caplog):
    with caplog.at_level(logging.WARNING):
        view = derive_tag_view(["user:zoo", "color:blue", "color:red"])
    assert view.color_label == "blue"
    assert view.tags == (TagItem("zoo", True),)
    assert "Multiple color labels" in caplog.text


def test_sort_is_case_insensitive():
    view = derive_tag_view(["user:Zebra", "apple", "user:mango"])
    assert [t.display_name for t in view.tags] == ["apple", "mango", "Zebra"]


def test_sort_places_accented_names_by_base_letter():
    view = derive_tag_view(["eb", "user:éa", "ez"])
    assert [t.display_name for t in view.tags] == ["éa", "eb", "ez"]


def test_derivation_is_idempotent():
    raw = ["user:b", "color:green", "a", "user:c"]
    first = derive_tag_view(raw)
    second = derive_tag_view(raw)
    assert first == second
    assert raw == ["user:b", "color:green", "a", "user:c"]


def test_removal_then_rederivation_keeps_relative_order():
    raw = ["user:delta", "alpha", "user:charlie", "bravo"]
    before = derive_tag_view(raw)
    removed = TagItem("charlie", True)
    after = derive_tag_view([t for t in raw if t != to_raw_tag(removed)])
    assert removed not in after.tags
    assert list(after.tags) == [t for t in before.tags if t != removed]


def test_has_tag():
    view = DerivedTagView(None, (TagItem("beach", True),))
    assert view.has_tag("beach")
    assert not view.has_tag("Beach")


def test_normalize_tag_input():
    assert normalize_tag_input("  Beach ") == "beach"
    assert normalize_tag_input("   ") == ""
    assert normalize_tag_input(None) == ""


def test_to_raw_tag():
    assert to_raw_tag(TagItem("beach", True)) == "user:beach"
    assert to_raw_tag(TagItem("flagged", False)) == "flagged"


def test_to_dict():
    assert TagItem("beach", True).to_dict() == {"tag": "beach", "isUser": True}


def test_replace_color_label():
    raw = ["color:red", "user:a", "color:blue"]
    assert replace_color_label(raw, "green") == ["user:a", "color:green"]
    assert replace_color_label(raw, None) == ["user:a"]
