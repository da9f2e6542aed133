"""Parser configuration loaded from JSON resources."""

from __future__ import annotations

import json
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Mapping

_CONFIG_RESOURCE = "smf.json"
_PARSER_CONFIG_CACHE: ParserConfig | None = None

VALID_MODES = ("strict", "lenient", "auto")
_DEFAULT_MODE = "strict"
_DEFAULT_MAX_VLQ_BYTES = 4
_DEFAULT_TEXT_ENCODING = "latin-1"
_DEFAULT_TEMPO_US = 500_000


@dataclass(frozen=True)
class ParserConfig:
    """Structured configuration values for SMF parsing and playback timing."""

    mode: str = _DEFAULT_MODE
    max_vlq_bytes: int = _DEFAULT_MAX_VLQ_BYTES
    text_encoding: str = _DEFAULT_TEXT_ENCODING
    default_tempo_us: int = _DEFAULT_TEMPO_US


def get_parser_config() -> ParserConfig:
    """Return the cached parser configuration."""

    global _PARSER_CONFIG_CACHE
    if _PARSER_CONFIG_CACHE is None:
        _PARSER_CONFIG_CACHE = load_parser_config()
    return _PARSER_CONFIG_CACHE


def reset_parser_config_cache() -> None:
    """Reset the cached configuration for subsequent reloads."""

    global _PARSER_CONFIG_CACHE
    _PARSER_CONFIG_CACHE = None


def load_parser_config(path: str | Path | None = None) -> ParserConfig:
    """Load configuration from ``path`` or the bundled JSON resource."""

    data = _read_config_data(path)
    parser_section = data.get("parser")
    playback_section = data.get("playback")
    if not isinstance(parser_section, Mapping):
        parser_section = {}
    if not isinstance(playback_section, Mapping):
        playback_section = {}

    return ParserConfig(
        mode=_coerce_mode(parser_section.get("mode")),
        max_vlq_bytes=_coerce_vlq_bytes(parser_section.get("max_vlq_bytes")),
        text_encoding=_coerce_encoding(parser_section.get("text_encoding")),
        default_tempo_us=_coerce_positive_int(
            playback_section.get("default_tempo_us"), default=_DEFAULT_TEMPO_US
        ),
    )


def _read_config_data(path: str | Path | None) -> Mapping[str, Any]:
    if path is not None:
        return _load_json_from_path(Path(path).expanduser())
    return _load_default_config_data()


def _load_json_from_path(path: Path) -> Mapping[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    return _parse_json(raw)


def _load_default_config_data() -> Mapping[str, Any]:
    try:
        resource = resources.files(__package__).joinpath(_CONFIG_RESOURCE)
        raw = resource.read_text(encoding="utf-8")
    except (FileNotFoundError, OSError):
        return {}
    return _parse_json(raw)


def _parse_json(raw: str) -> Mapping[str, Any]:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    if isinstance(parsed, Mapping):
        return parsed
    return {}


def _coerce_mode(value: Any) -> str:
    if not isinstance(value, str):
        return _DEFAULT_MODE
    candidate = value.strip().lower()
    if candidate not in VALID_MODES:
        return _DEFAULT_MODE
    return candidate


def _coerce_vlq_bytes(value: Any) -> int:
    candidate = _coerce_positive_int(value, default=_DEFAULT_MAX_VLQ_BYTES)
    return min(candidate, _DEFAULT_MAX_VLQ_BYTES)


def _coerce_encoding(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        return _DEFAULT_TEXT_ENCODING
    try:
        "".encode(value.strip())
    except LookupError:
        return _DEFAULT_TEXT_ENCODING
    return value.strip()


def _coerce_positive_int(value: Any, *, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        candidate = int(value)
    elif isinstance(value, str):
        try:
            candidate = int(float(value))
        except ValueError:
            return default
    else:
        return default
    if candidate <= 0:
        return default
    return candidate


__all__ = [
    "ParserConfig",
    "VALID_MODES",
    "get_parser_config",
    "load_parser_config",
    "reset_parser_config_cache",
]
