"""Global configuration management for entrytitles."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from contextlib import contextmanager
from contextvars import ContextVar
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict

from .text import Messages

DEFAULT_CONFIG_DIR = Path(os.path.expanduser("~")) / ".entrytitles"
CONFIG_DIR = DEFAULT_CONFIG_DIR
CONFIG_FILE = CONFIG_DIR / "config.json"
_CONFIG_DIR_OVERRIDE: ContextVar[Path | None] = ContextVar(
    "entrytitles_config_dir_override",
    default=None,
)
DEFAULT_STATE_DIRNAME = "state"
DEFAULT_TITLES_FILENAME = "titles.dat"
DEFAULT_USE_CACHING = True
DEFAULT_FILE_EXTENSIONS: Dict[str, str] = {
    "txt": "text",
    "blx": "blx",
    "html": "html",
    "htm": "html",
    "docx": "docx",
    "pptx": "pptx",
    "pdf": "pdf",
}


@dataclass
class Config:
    use_caching: bool = DEFAULT_USE_CACHING
    state_dir: str | None = None
    titles_cachefile: str | None = None
    file_extensions: Dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_FILE_EXTENSIONS)
    )


def _resolve_config_dir() -> Path:
    override = _CONFIG_DIR_OVERRIDE.get()
    return override if override is not None else CONFIG_DIR


def _resolve_config_file() -> Path:
    override = _CONFIG_DIR_OVERRIDE.get()
    if override is not None:
        return override / "config.json"
    return CONFIG_FILE


@contextmanager
def config_dir_context(path: Path | str | None):
    """Temporarily override the config directory for the current context."""

    if path is None:
        yield
        return
    dir_path = Path(path).expanduser().resolve()
    if dir_path.exists() and not dir_path.is_dir():
        raise NotADirectoryError(f"Path is not a directory: {dir_path}")
    token = _CONFIG_DIR_OVERRIDE.set(dir_path)
    try:
        yield
    finally:
        _CONFIG_DIR_OVERRIDE.reset(token)


def set_config_dir(path: Path | str | None) -> None:
    global CONFIG_DIR, CONFIG_FILE
    if path is None:
        CONFIG_DIR = DEFAULT_CONFIG_DIR
    else:
        dir_path = Path(path).expanduser().resolve()
        if dir_path.exists() and not dir_path.is_dir():
            raise NotADirectoryError(f"Path is not a directory: {dir_path}")
        CONFIG_DIR = dir_path
    CONFIG_FILE = CONFIG_DIR / "config.json"


def load_config() -> Config:
    config_file = _resolve_config_file()
    if not config_file.exists():
        return Config()
    raw = json.loads(config_file.read_text(encoding="utf-8"))
    return Config(
        use_caching=bool(raw.get("use_caching", DEFAULT_USE_CACHING)),
        state_dir=raw.get("state_dir") or None,
        titles_cachefile=raw.get("titles_cachefile") or None,
        file_extensions=_parse_file_extensions(raw.get("file_extensions")),
    )


def save_config(config: Config) -> None:
    config_dir = _resolve_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    data: Dict[str, Any] = {}
    data["use_caching"] = bool(config.use_caching)
    if config.state_dir:
        data["state_dir"] = config.state_dir
    if config.titles_cachefile:
        data["titles_cachefile"] = config.titles_cachefile
    if config.file_extensions != DEFAULT_FILE_EXTENSIONS:
        data["file_extensions"] = dict(config.file_extensions)
    config_file = _resolve_config_file()
    config_file.write_text(
        json.dumps(data, ensure_ascii=False, indent=2),
        encoding="utf-8",
    )


def default_state_dir() -> Path:
    return _resolve_config_dir() / DEFAULT_STATE_DIRNAME


def resolve_state_dir(config: Config) -> Path:
    """Return the state directory the host would hand to plugins."""
    if config.state_dir:
        return Path(config.state_dir).expanduser()
    return default_state_dir()


def resolve_titles_cachefile(config: Config) -> Path:
    """Return the title cache path, defaulting to `titles.dat` in the state dir."""
    if config.titles_cachefile:
        return Path(config.titles_cachefile).expanduser()
    return resolve_state_dir(config) / DEFAULT_TITLES_FILENAME


def set_use_caching(value: bool) -> None:
    config = load_config()
    config.use_caching = bool(value)
    save_config(config)


def set_state_dir(value: str | None) -> None:
    config = load_config()
    config.state_dir = (value or "").strip() or None
    save_config(config)


def set_titles_cachefile(value: str | None) -> None:
    config = load_config()
    config.titles_cachefile = (value or "").strip() or None
    save_config(config)


def config_from_json(
    payload: str | Mapping[str, object], *, base: Config | None = None
) -> Config:
    """Return a Config from a JSON string or mapping without saving it."""
    data = _coerce_config_payload(payload)
    config = Config() if base is None else _clone_config(base)
    _apply_config_payload(config, data)
    return config


def _parse_file_extensions(raw: object) -> Dict[str, str]:
    if not isinstance(raw, dict):
        return dict(DEFAULT_FILE_EXTENSIONS)
    parsed: Dict[str, str] = {}
    for ext, fmt in raw.items():
        if not isinstance(ext, str) or not isinstance(fmt, str):
            continue
        key = ext.strip().lstrip(".").lower()
        value = fmt.strip().lower()
        if key and value:
            parsed[key] = value
    return parsed or dict(DEFAULT_FILE_EXTENSIONS)


def _coerce_config_payload(payload: str | Mapping[str, object]) -> Mapping[str, object]:
    if isinstance(payload, str):
        try:
            data = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise ValueError(Messages.ERROR_CONFIG_JSON_INVALID) from exc
    elif isinstance(payload, Mapping):
        data = dict(payload)
    else:
        raise ValueError(Messages.ERROR_CONFIG_JSON_INVALID)
    if not isinstance(data, Mapping):
        raise ValueError(Messages.ERROR_CONFIG_JSON_INVALID)
    return data


def _clone_config(config: Config) -> Config:
    return Config(
        use_caching=config.use_caching,
        state_dir=config.state_dir,
        titles_cachefile=config.titles_cachefile,
        file_extensions=dict(config.file_extensions),
    )


def _apply_config_payload(config: Config, payload: Mapping[str, object]) -> None:
    if "use_caching" in payload:
        config.use_caching = _coerce_bool(payload["use_caching"], "use_caching")
    if "state_dir" in payload:
        config.state_dir = _coerce_optional_str(payload["state_dir"], "state_dir")
    if "titles_cachefile" in payload:
        config.titles_cachefile = _coerce_optional_str(
            payload["titles_cachefile"], "titles_cachefile"
        )
    if "file_extensions" in payload:
        config.file_extensions = _coerce_file_extensions(payload["file_extensions"])


def _coerce_optional_str(value: object, field: str) -> str | None:
    if value is None:
        return None
    if isinstance(value, (str, Path)):
        cleaned = str(value).strip()
        return cleaned or None
    raise ValueError(Messages.ERROR_CONFIG_VALUE_INVALID.format(field=field))


def _coerce_bool(value: object, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        cleaned = value.strip().lower()
        if cleaned in {"true", "1", "yes", "on"}:
            return True
        if cleaned in {"false", "0", "no", "off"}:
            return False
    raise ValueError(Messages.ERROR_CONFIG_VALUE_INVALID.format(field=field))


def _coerce_file_extensions(value: object) -> Dict[str, str]:
    if value is None:
        return dict(DEFAULT_FILE_EXTENSIONS)
    if not isinstance(value, Mapping):
        raise ValueError(Messages.ERROR_CONFIG_VALUE_INVALID.format(field="file_extensions"))
    for ext, fmt in value.items():
        if not isinstance(ext, str) or not isinstance(fmt, str):
            raise ValueError(
                Messages.ERROR_CONFIG_VALUE_INVALID.format(field="file_extensions")
            )
    return _parse_file_extensions(dict(value))
