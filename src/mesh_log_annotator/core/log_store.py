"""Loading of stored mesh log records.

Records are stored one JSON object per line, optionally gzip-compressed.
"""

from __future__ import annotations

import gzip
import json
import logging
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from pathlib import Path

import aiofiles
from aiofiles.threadpool import wrap
from pydantic import ValidationError

from .models import MeshLog
from .schema import MeshLogRecord

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _open_text(path: Path, *, encoding: str, decode_errors: str):
    """Open a record file for async text reading (plain or gzip)."""
    if path.suffix.lower() == ".gz":
        f = gzip.open(path, mode="rt", encoding=encoding, errors=decode_errors)
        af = wrap(f)
        try:
            yield af
        finally:
            await af.close()
    else:
        async with aiofiles.open(path, encoding=encoding, errors=decode_errors) as f:
            yield f


def parse_record_line(line_no: int, line: str) -> MeshLog | None:
    """Parse one stored line; return None (and log) when it is not a valid record."""
    s = line.strip()
    if not s:
        return None
    try:
        obj = json.loads(s)
    except json.JSONDecodeError as e:
        logger.warning("line %d: invalid JSON (%s)", line_no, e.msg)
        return None
    try:
        record = MeshLogRecord.model_validate(obj)
    except ValidationError as e:
        logger.warning("line %d: invalid mesh log record (%d errors)", line_no, e.error_count())
        return None
    return record.to_mesh_log()


async def iter_mesh_logs(
    log_path: str | Path,
    *,
    encoding: str = "utf-8",
    decode_errors: str = "replace",
) -> AsyncIterator[MeshLog]:
    """Yield records from a stored log file in file order."""
    path = Path(log_path)
    if not path.is_file():
        raise FileNotFoundError(f"Log file not found: {path}")

    async with _open_text(path, encoding=encoding, decode_errors=decode_errors) as f:
        line_no = 0
        async for line in f:
            line_no += 1
            log = parse_record_line(line_no, line)
            if log is not None:
                yield log


async def load_mesh_logs(
    log_path: str | Path,
    *,
    message_types: Iterable[str] | None = None,
    limit: int | None = None,
    newest_first: bool = True,
    **iter_kwargs,
) -> list[MeshLog]:
    """Collect records, filtered by kind and ordered by receive time."""
    if limit is not None and limit <= 0:
        raise ValueError("limit must be > 0")

    allowed: set[str] | None = None
    if message_types is not None:
        allowed = set(message_types)

    logs = [
        log
        async for log in iter_mesh_logs(log_path, **iter_kwargs)
        if allowed is None or log.message_type in allowed
    ]
    logs.sort(key=lambda log: log.received_date, reverse=newest_first)
    if limit is not None:
        logs = logs[:limit]
    return logs
