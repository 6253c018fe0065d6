"""Acknowledgment returned by model mutations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ModelAck:
    """Successful create/update/delete of a model."""

    model: str
    success: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {"success": self.success, "model": self.model}
