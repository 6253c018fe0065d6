"""Domain entities."""

from threat_store.domain.entities.ack import ModelAck
from threat_store.domain.entities.revision import Revision

__all__ = [
    "ModelAck",
    "Revision",
]
