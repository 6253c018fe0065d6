"""Revision entity for model history."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Revision:
    """A historical state of one model's file.

    Attributes:
        hash: Full commit SHA
        date: ISO-8601 committer timestamp, with UTC offset
        message: Commit summary line
        author: Commit author name
    """

    hash: str
    date: str
    message: str
    author: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "hash": self.hash,
            "date": self.date,
            "message": self.message,
            "author": self.author,
        }
