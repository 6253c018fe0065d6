"""Domain services."""

from threat_store.domain.services.document_codec import decode_document, encode_document
from threat_store.domain.services.keyed_lock import KeyedLock

__all__ = [
    "KeyedLock",
    "decode_document",
    "encode_document",
]
