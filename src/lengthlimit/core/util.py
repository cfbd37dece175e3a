from __future__ import annotations
from typing import Dict, Any, Iterable
from .model import ReadResult


def result_asdict(res: ReadResult, *, fields: Iterable[str] | None = None) -> Dict[str, Any]:
    """Return a JSON-serialisable dict (skip None, never the data) optionally filtered."""
    payload = {
        "source": res.source,
        "success": res.success,
        "bytes_read": res.bytes_read,
        "bytes_remaining": res.bytes_remaining,
        "limit_exceeded": res.limit_exceeded,
        "error": res.error,
    }
    payload = {k: v for k, v in payload.items() if v is not None}
    if fields:
        wanted = set(fields) | {"success"}
        payload = {k: v for k, v in payload.items() if k in wanted}
    return payload
