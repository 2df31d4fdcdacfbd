"""
Opaque cursors exchanged with clients.

A cursor is the URL-safe base64 of a small JSON object holding an entity's
identifying sort key. Decoding never raises: malformed or tampered input
decodes to None.
"""

import base64
import binascii
import json
from typing import Any, Dict, Optional

from pydantic import BaseModel, ValidationError


def encode_cursor(key: Dict[str, Any]) -> str:
    """Serialize a sort key into an opaque cursor string."""
    raw = json.dumps(key, separators=(",", ":"), sort_keys=True)
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii")


def decode_cursor(value: Optional[str]) -> Optional[Dict[str, Any]]:
    """Decode a cursor string, or None if it is not one we produced."""
    if not value:
        return None
    try:
        raw = base64.b64decode(value.encode("ascii"), altchars=b"-_", validate=True)
        key = json.loads(raw.decode("utf-8"))
    except (UnicodeError, binascii.Error, ValueError):
        return None
    return key if isinstance(key, dict) else None


class PaperCursor(BaseModel):
    """Cursor pointing at a paper by id."""

    id: str

    def encode(self) -> str:
        return encode_cursor(self.model_dump())

    @classmethod
    def decode(cls, value: Optional[str]) -> Optional["PaperCursor"]:
        key = decode_cursor(value)
        if key is None:
            return None
        try:
            return cls.model_validate(key)
        except ValidationError:
            return None
