"""
Temporary storage for upload previews.

Parsed rows are kept in memory between /preview and /confirm, keyed by
preview_id and owned by the tenant that uploaded them. Single process only.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from config import settings
from parsers.csv_parser import widest_row


@dataclass
class CachedUpload:
    """Parsed upload waiting for a mapping and a period."""
    tenant_id: str
    rows: list[list[str]]
    encoding: str
    has_header_row: bool = False
    filename: Optional[str] = None

    @property
    def column_count(self) -> int:
        return widest_row(self.rows)


_cache: dict[str, tuple[datetime, CachedUpload]] = {}


def store_preview(data: CachedUpload, ttl_minutes: Optional[int] = None) -> str:
    """Store a parsed upload, return preview_id."""
    ttl = ttl_minutes or settings.preview_ttl_minutes
    preview_id = str(uuid.uuid4())
    _cache[preview_id] = (datetime.now() + timedelta(minutes=ttl), data)
    _cleanup_expired()
    return preview_id


def retrieve_preview(preview_id: str, tenant_id: str) -> Optional[CachedUpload]:
    """Get a tenant's upload. None if expired, unknown or someone else's."""
    entry = _cache.get(preview_id)
    if entry is None:
        return None
    expires_at, data = entry
    if datetime.now() > expires_at:
        del _cache[preview_id]
        return None
    if data.tenant_id != tenant_id:
        return None
    return data


def delete_preview(preview_id: str) -> None:
    """Remove preview after confirm or cancel."""
    _cache.pop(preview_id, None)


def clear() -> None:
    _cache.clear()


def _cleanup_expired() -> None:
    now = datetime.now()
    expired = [k for k, (exp, _) in _cache.items() if now > exp]
    for k in expired:
        del _cache[k]
