from __future__ import annotations
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional
import yaml
from logger import log

CONFIG_PATH = Path("~/.config/kisan_manch/config.yaml").expanduser()
PREFS_PATH = Path("~/.config/kisan_manch/prefs.yaml").expanduser()
DEFAULT_API_URL = "https://api.rashtriyakisanmanch.com"


@dataclass
class Settings:
    api_base_url: str = DEFAULT_API_URL
    fallback_api_url: Optional[str] = None
    request_timeout: float = 15.0
    receipts_dir: Path = field(
        default_factory=lambda: Path("~/KisanManch/receipts").expanduser()
    )
    language: str = "hi"
    prefs_path: Path = PREFS_PATH


def _read_yaml(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        log.warning("Ignoring unreadable config %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        log.warning("Ignoring config %s: expected a mapping", path)
        return {}
    return data


def _apply(settings: Settings, key: str, raw) -> None:
    if raw is None or raw == "":
        return
    try:
        if key == "request_timeout":
            settings.request_timeout = float(raw)
        elif key in ("receipts_dir", "prefs_path"):
            setattr(settings, key, Path(str(raw)).expanduser())
        elif key in ("api_base_url", "fallback_api_url"):
            setattr(settings, key, str(raw).rstrip("/"))
        elif key == "language":
            settings.language = str(raw).lower()
        else:
            log.warning("Unknown config key %r ignored", key)
    except (TypeError, ValueError) as e:
        log.warning("Bad value for %s (%r): %s", key, raw, e)


ENV_KEYS = {
    "KISAN_API_URL": "api_base_url",
    "KISAN_FALLBACK_API_URL": "fallback_api_url",
    "KISAN_TIMEOUT": "request_timeout",
    "KISAN_RECEIPTS_DIR": "receipts_dir",
    "KISAN_LANG": "language",
}


def load_settings(
    path: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Defaults, then the YAML file, then environment variables."""
    settings = Settings()
    for key, raw in _read_yaml(path or CONFIG_PATH).items():
        _apply(settings, str(key), raw)
    env = os.environ if env is None else env
    for var, key in ENV_KEYS.items():
        if var in env:
            _apply(settings, key, env[var])
    log.info(
        "Settings: api=%s fallback=%s lang=%s receipts=%s",
        settings.api_base_url, settings.fallback_api_url,
        settings.language, settings.receipts_dir,
    )
    return settings
