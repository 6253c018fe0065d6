"""JSON serialization of threat model documents."""

from __future__ import annotations

import json
from typing import Any

from threat_store.domain.errors import MalformedContentError

INDENT = 2


def encode_document(body: Any) -> bytes:
    """Serialize a document as pretty-printed UTF-8 JSON."""
    return json.dumps(body, indent=INDENT, ensure_ascii=False).encode("utf-8")


def decode_document(content: bytes, source: str) -> Any:
    """Parse stored document bytes.

    Args:
        content: Raw file or blob contents
        source: Description of where the bytes came from, for the error message

    Raises:
        MalformedContentError: If the content is not UTF-8 JSON
    """
    try:
        return json.loads(content.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise MalformedContentError(f"Malformed content in {source}: {exc}") from exc
