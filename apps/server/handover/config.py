from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

SERVER_DIR = Path(__file__).resolve().parents[1]
"""Root of the ``apps/server/`` package tree."""

LOGGER = logging.getLogger(__name__)

VALID_LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_CONFIG: dict[str, Any] = {
    "server": {"host": "0.0.0.0", "port": 8000},
    "storage": {
        "handover_db_path": "data/handovers.db",
    },
    "report": {
        "company_name": "VEHICLE HANDOVER",
        "company_address": "",
        "company_phone": "",
        "image_fetch_timeout_s": 5.0,
        "image_fetch_workers": 4,
        "image_max_bytes": 15 * 1024 * 1024,
        "repeat_table_header": True,
        "pdf_cache_entries": 16,
    },
    "logging": {"level": "INFO"},
}


def documented_default_config() -> dict[str, Any]:
    """Return runtime defaults in the shape documented by config.example.yaml."""
    return deepcopy(DEFAULT_CONFIG)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


_TRUE_WORDS = frozenset({"1", "true", "yes", "on"})
_FALSE_WORDS = frozenset({"0", "false", "no", "off"})


def _as_bool(value: Any, key: str) -> bool:
    """Accept YAML booleans and the usual quoted spellings; reject anything else."""
    if isinstance(value, bool):
        return value
    word = str(value).strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ValueError(f"{key} must be a boolean, got {value!r}")


def _resolve_config_path(path_text: str, config_path: Path) -> Path:
    path = Path(path_text)
    if path.is_absolute():
        return path
    return config_path.resolve().parent / path


@dataclass(slots=True)
class ServerConfig:
    host: str
    port: int

    def __post_init__(self) -> None:
        if not isinstance(self.port, int) or not (1 <= self.port <= 65535):
            raise ValueError(f"server.port must be 1-65535, got {self.port!r}")


@dataclass(slots=True)
class StorageConfig:
    handover_db_path: Path


@dataclass(slots=True)
class ReportConfig:
    company_name: str
    company_address: str
    company_phone: str
    image_fetch_timeout_s: float
    image_fetch_workers: int
    image_max_bytes: int
    repeat_table_header: bool
    pdf_cache_entries: int

    def __post_init__(self) -> None:
        if self.image_fetch_timeout_s <= 0:
            raise ValueError(
                f"report.image_fetch_timeout_s must be > 0, got {self.image_fetch_timeout_s!r}"
            )
        _MIN_FIELDS: dict[str, int] = {
            "image_fetch_workers": 1,
            "image_max_bytes": 1,
            "pdf_cache_entries": 1,
        }
        for field_name, minimum in _MIN_FIELDS.items():
            val = getattr(self, field_name)
            if val < minimum:
                LOGGER.warning(
                    "report.%s=%s is below minimum %s, clamped to %s",
                    field_name,
                    val,
                    minimum,
                    minimum,
                )
                object.__setattr__(self, field_name, minimum)


@dataclass(slots=True)
class LoggingConfig:
    level: str

    def __post_init__(self) -> None:
        level = str(self.level).strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"logging.level must be one of {VALID_LOG_LEVELS}, got {self.level!r}")
        object.__setattr__(self, "level", level)


def configure_logging(level: str) -> None:
    """Configure root logging for the CLI and server entry points."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@dataclass(slots=True)
class AppConfig:
    server: ServerConfig
    storage: StorageConfig
    report: ReportConfig
    logging: LoggingConfig
    config_path: Path


def report_config_from_mapping(raw: dict[str, Any] | None = None) -> ReportConfig:
    """Build a :class:`ReportConfig` from a ``report:`` mapping, defaults filled in."""
    report_cfg = _deep_merge(DEFAULT_CONFIG["report"], raw or {})
    return ReportConfig(
        company_name=str(report_cfg.get("company_name") or ""),
        company_address=str(report_cfg.get("company_address") or ""),
        company_phone=str(report_cfg.get("company_phone") or ""),
        image_fetch_timeout_s=float(report_cfg["image_fetch_timeout_s"]),
        image_fetch_workers=int(report_cfg["image_fetch_workers"]),
        image_max_bytes=int(report_cfg["image_max_bytes"]),
        repeat_table_header=_as_bool(
            report_cfg["repeat_table_header"], "report.repeat_table_header"
        ),
        pdf_cache_entries=int(report_cfg["pdf_cache_entries"]),
    )


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a YAML object at the top level.")
        return data


def load_config(config_path: Path | None = None) -> AppConfig:
    path = config_path or (SERVER_DIR / "config.yaml")
    path = path.resolve()
    override = _read_config_file(path)
    merged = _deep_merge(DEFAULT_CONFIG, override)

    db_path_raw = merged["storage"].get("handover_db_path")
    if not isinstance(db_path_raw, str) or not db_path_raw.strip():
        raise ValueError("storage.handover_db_path must be a non-empty path.")

    app_config = AppConfig(
        server=ServerConfig(
            host=str(merged["server"]["host"]),
            port=int(merged["server"]["port"]),
        ),
        storage=StorageConfig(
            handover_db_path=_resolve_config_path(db_path_raw, path),
        ),
        report=report_config_from_mapping(merged["report"]),
        logging=LoggingConfig(level=str(merged["logging"].get("level", "INFO"))),
        config_path=path,
    )
    LOGGER.info(
        "Loaded config=%s handover_db_path=%s",
        app_config.config_path,
        app_config.storage.handover_db_path,
    )
    return app_config
