from core.metadata_normalizer import (
    KEY_CAMERA_SETTINGS,
    CameraSettingField,
    normalize_camera_settings,
)


def test_output_follows_configured_priority_not_input_order():
    raw = {
        "LensModel": "RF 50mm",
        "ExposureTime": "1/250",
        "FNumber": 2.8,
        "PhotographicSensitivity": 400,
        "FocalLengthIn35mmFilm": 50,
    }
    entries = normalize_camera_settings(raw)
    assert [e.key for e in entries] == [
        "FNumber",
        "ExposureTime",
        "PhotographicSensitivity",
        "FocalLengthIn35mmFilm",
        "LensModel",
    ]
    assert [e.label for e in entries] == [
        "Aperture",
        "Shutter Speed",
        "ISO",
        "Focal Length",
        "Lens",
    ]


def test_missing_and_none_values_are_omitted():
    entries = normalize_camera_settings({"FNumber": None, "ExposureTime": "1/60"})
    assert [e.key for e in entries] == ["ExposureTime"]
    assert normalize_camera_settings({}) == []


def test_per_field_formatting():
    raw = {
        "FNumber": 1.8,
        "ExposureTime": "1/1000",
        "PhotographicSensitivity": 100,
        "FocalLengthIn35mmFilm": 35,
        "LensModel": 'FE 24-70mm F2.8 GM "II"',
    }
    values = {e.key: e.formatted_value for e in normalize_camera_settings(raw)}
    assert values["FNumber"] == "1.8"
    assert values["ExposureTime"] == "1/1000"
    assert values["PhotographicSensitivity"] == 100
    assert values["FocalLengthIn35mmFilm"] == "35 mm"
    assert values["LensModel"] == "FE 24-70mm F2.8 GM II"


def test_focal_length_unit_not_duplicated():
    entries = normalize_camera_settings({"FocalLengthIn35mmFilm": "50mm"})
    assert entries[0].formatted_value == "50mm"


def test_unconfigured_keys_are_ignored():
    entries = normalize_camera_settings({"Make": "Canon", "Model": "R5"})
    assert entries == []


def test_custom_field_list():
    fields = [CameraSettingField("Make", "Camera", str.upper)]
    entries = normalize_camera_settings({"Make": "canon", "FNumber": 4}, fields)
    assert len(entries) == 1
    assert entries[0].formatted_value == "CANON"
    assert len(KEY_CAMERA_SETTINGS) == 5
