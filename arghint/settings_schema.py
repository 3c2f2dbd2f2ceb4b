from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypedDict

logger = logging.getLogger(__name__)

TOOLTIP_PLACEMENTS = (
    "below",
    "above",
)


class ArgHintSettings(TypedDict, total=False):
    enabled: bool
    mask_before: str
    mask_after: str
    overflow_message: str
    inside_message: str
    separator: str
    opener: str
    closer: str
    close_on_focus_out: bool
    placement: str
    wrap_width: int


def default_arg_hint_settings() -> ArgHintSettings:
    return {
        "enabled": True,
        "mask_before": ".",
        "mask_after": "?",
        "overflow_message": "Too many arguments",
        "inside_message": "Inside nested expression",
        "separator": ", ",
        "opener": "(",
        "closer": ")",
        "close_on_focus_out": True,
        "placement": "below",
        "wrap_width": 88,
    }


def normalize_arg_hint_settings(raw: Any) -> ArgHintSettings:
    defaults = default_arg_hint_settings()
    data = dict(defaults)
    if isinstance(raw, dict):
        for key, value in raw.items():
            data[str(key)] = value

    placement = str(data.get("placement", defaults["placement"]) or defaults["placement"]).strip().lower()
    if placement not in TOOLTIP_PLACEMENTS:
        placement = defaults["placement"]

    def _clamp_int(value: Any, low: int, high: int, fallback: int) -> int:
        try:
            return max(low, min(high, int(value)))
        except Exception:
            return fallback

    def _token(key: str) -> str:
        # Mask tokens may legitimately be a single space, so only None falls back.
        value = data.get(key)
        if value is None:
            return str(defaults[key])
        return str(value)

    def _non_empty(key: str) -> str:
        return str(data.get(key) or "") or str(defaults[key])

    return {
        "enabled": bool(data.get("enabled", defaults["enabled"])),
        "mask_before": _token("mask_before"),
        "mask_after": _token("mask_after"),
        "overflow_message": _token("overflow_message"),
        "inside_message": _token("inside_message"),
        "separator": _non_empty("separator"),
        "opener": _non_empty("opener"),
        "closer": _non_empty("closer"),
        "close_on_focus_out": bool(data.get("close_on_focus_out", defaults["close_on_focus_out"])),
        "placement": placement,
        "wrap_width": _clamp_int(data.get("wrap_width"), 20, 400, int(defaults["wrap_width"])),
    }


def load_arg_hint_settings(path: str | Path | None) -> ArgHintSettings:
    """Read settings from a JSON file; a missing or unreadable file means defaults."""
    if not path:
        return default_arg_hint_settings()
    settings_path = Path(path).expanduser()
    if not settings_path.is_file():
        return default_arg_hint_settings()
    try:
        raw = json.loads(settings_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("could not read arg hint settings %s: %s", settings_path, exc)
        return default_arg_hint_settings()
    # Accept either a bare settings object or one nested under "arg_hint".
    if isinstance(raw, dict) and isinstance(raw.get("arg_hint"), dict):
        raw = raw["arg_hint"]
    return normalize_arg_hint_settings(raw)


@dataclass(slots=True)
class NormalizedArgHintConfig:
    enabled: bool
    mask_before: str
    mask_after: str
    overflow_message: str
    inside_message: str
    separator: str
    opener: str
    closer: str
    close_on_focus_out: bool
    placement: str
    wrap_width: int

    @classmethod
    def from_mapping(cls, data: Any) -> "NormalizedArgHintConfig":
        n = normalize_arg_hint_settings(data)
        return cls(
            enabled=bool(n["enabled"]),
            mask_before=str(n["mask_before"]),
            mask_after=str(n["mask_after"]),
            overflow_message=str(n["overflow_message"]),
            inside_message=str(n["inside_message"]),
            separator=str(n["separator"]),
            opener=str(n["opener"]),
            closer=str(n["closer"]),
            close_on_focus_out=bool(n["close_on_focus_out"]),
            placement=str(n["placement"]),
            wrap_width=int(n["wrap_width"]),
        )
