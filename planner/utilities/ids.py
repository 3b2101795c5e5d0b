"""Identifier and timestamp helpers shared by the domain entities."""
from datetime import datetime, timezone
from uuid import uuid4


def create_id(prefix: str) -> str:
    return f"{prefix}-{uuid4().hex[:8]}"


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
