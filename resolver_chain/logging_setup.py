"""
JSONL sink for resolution diagnostics.

The chain and tracer log with ``extra=`` fields describing the request being
resolved. This sink writes one record per line and lifts those fields into a
``resolution`` object, so a log can be filtered by module or platform.
"""

import json
import logging
import os
from datetime import UTC
from datetime import datetime
from pathlib import Path

DEFAULT_PATH = os.environ.get("RESOLVER_CHAIN_LOG_PATH", "./resolver-chain.log.jsonl")
DEFAULT_LEVEL = os.environ.get("RESOLVER_CHAIN_LOG_LEVEL", "INFO").upper()

LOG_SCHEMA = {"name": "resolver_chain.log", "ver": "1.0.0"}

# Fields the chain and tracer attach via `extra=`
RESOLUTION_FIELDS = (
    "module_name",
    "platform",
    "origin_module_path",
    "resolver_kind",
    "options_key",
    "node_count",
)


def resolution_extra(**fields) -> dict:
    """Build an ``extra=`` mapping for a resolution log record, dropping unset fields."""
    return {k: v for k, v in fields.items() if v is not None}


class ResolutionJsonlHandler(logging.Handler):
    """Writes resolver log records as JSON lines."""

    def __init__(self, path: str | Path):
        super().__init__()
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def format_record(self, record: logging.LogRecord) -> dict:
        payload = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(timespec="milliseconds"),
            "lvl": record.levelname,
            "schema": LOG_SCHEMA,
            "logger": record.name,
            "event": getattr(record, "event", None),
            "message": record.getMessage(),
        }
        resolution = {name: getattr(record, name) for name in RESOLUTION_FIELDS if hasattr(record, name)}
        if resolution:
            payload["resolution"] = resolution
        return payload

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = json.dumps(self.format_record(record), ensure_ascii=False, default=str)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except Exception:
            self.handleError(record)


def init_json_logging(path: str | Path | None = None, level: str | None = None) -> ResolutionJsonlHandler:
    """Install the JSONL sink on the root logger, replacing any earlier one."""
    path = path or DEFAULT_PATH
    level = (level or DEFAULT_LEVEL).upper()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level, logging.INFO))
    for h in list(root.handlers):
        if isinstance(h, ResolutionJsonlHandler):
            root.removeHandler(h)
    handler = ResolutionJsonlHandler(path)
    root.addHandler(handler)
    return handler
