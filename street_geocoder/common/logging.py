"""JSON-lines logging with a fixed field set."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from street_geocoder.common.constants import JSON_LOG_FIELDS
from street_geocoder.common.fs import ensure_dir
from street_geocoder.common.time_utils import utc_timestamp_iso

ROOT_LOGGER_NAME = "street_geocoder"


class JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            field: getattr(record, field, None) for field in JSON_LOG_FIELDS if field not in ("timestamp", "message")
        }
        payload["timestamp"] = utc_timestamp_iso()
        payload["level"] = record.levelname
        payload["message"] = record.getMessage()
        return json.dumps(payload, ensure_ascii=False, default=str)


def get_logger(name: str | None = None) -> logging.Logger:
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def build_logger(run_id: str, data_dir: Path, level: str = "INFO") -> logging.Logger:
    logger = get_logger(run_id)
    logger.setLevel(level.upper())
    logger.handlers.clear()
    logger.propagate = False

    stream = logging.StreamHandler()
    stream.setFormatter(JsonLineFormatter())
    logger.addHandler(stream)

    log_path = data_dir / "run_meta" / f"{run_id}.log.jsonl"
    ensure_dir(log_path.parent)
    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setFormatter(JsonLineFormatter())
    logger.addHandler(file_handler)

    return logger


def close_logger(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def log_event(logger: logging.Logger, message: str, *, level: int = logging.INFO, **event_fields: Any) -> None:
    logger.log(level, message, extra=event_fields)
