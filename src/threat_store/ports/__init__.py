"""Ports layer - interface definitions following Hexagonal Architecture.

Ports are abstract interfaces (protocols) that define contracts:
- Inbound ports: APIs offered to clients (ModelRepositoryPort)
- Outbound ports: Dependencies on external systems (VersionControlPort)

Adapters implement these ports with concrete functionality.
"""

from threat_store.ports.inbound import ModelRepositoryPort
from threat_store.ports.outbound import VersionControlPort

__all__ = [
    "ModelRepositoryPort",
    "VersionControlPort",
]
