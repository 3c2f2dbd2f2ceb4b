from __future__ import annotations

import json

from arghint.settings_schema import (
    NormalizedArgHintConfig,
    default_arg_hint_settings,
    load_arg_hint_settings,
    normalize_arg_hint_settings,
)


def test_normalize_fills_defaults():
    assert normalize_arg_hint_settings(None) == default_arg_hint_settings()
    assert normalize_arg_hint_settings({"mask_after": "~"})["mask_before"] == "."


def test_normalize_clamps_and_falls_back():
    settings = normalize_arg_hint_settings(
        {
            "placement": "Sideways",
            "wrap_width": 5,
            "separator": "",
            "opener": None,
            "mask_before": " ",
        }
    )

    assert settings["placement"] == "below"
    assert settings["wrap_width"] == 20
    assert settings["separator"] == ", "
    assert settings["opener"] == "("
    assert settings["mask_before"] == " "
    assert normalize_arg_hint_settings({"wrap_width": "wide"})["wrap_width"] == 88
    assert normalize_arg_hint_settings({"placement": " ABOVE "})["placement"] == "above"


def test_config_from_mapping():
    cfg = NormalizedArgHintConfig.from_mapping({"enabled": 0, "wrap_width": 1000})

    assert cfg.enabled is False
    assert cfg.wrap_width == 400
    assert cfg.overflow_message == "Too many arguments"


def test_load_missing_file_gives_defaults(tmp_path):
    assert load_arg_hint_settings(tmp_path / "nope.json") == default_arg_hint_settings()
    assert load_arg_hint_settings(None) == default_arg_hint_settings()


def test_load_invalid_json_gives_defaults(tmp_path, caplog):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")

    assert load_arg_hint_settings(path) == default_arg_hint_settings()
    assert "could not read arg hint settings" in caplog.text


def test_load_nested_section(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"editor": {"font_size": 11}, "arg_hint": {"mask_before": "_", "placement": "above"}}),
        encoding="utf-8",
    )

    settings = load_arg_hint_settings(str(path))
    assert settings["mask_before"] == "_"
    assert settings["placement"] == "above"
    assert settings["mask_after"] == "?"


def test_load_bare_object(tmp_path):
    path = tmp_path / "arg_hint.json"
    path.write_text(json.dumps({"overflow_message": "stop"}), encoding="utf-8")

    assert load_arg_hint_settings(path)["overflow_message"] == "stop"
