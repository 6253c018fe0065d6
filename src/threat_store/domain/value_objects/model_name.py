"""Model name value object.

A model name is used verbatim as a directory name and as the stem of the
model file (``<root>/<name>/<name>.json``), so it must be a single, visible
path segment.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass

from threat_store.domain.errors import InvalidModelNameError

MAX_NAME_LENGTH = 255
HIDDEN_PREFIX = "."
MODEL_FILE_SUFFIX = ".json"

_FORBIDDEN_CHARACTERS = frozenset("/\\\x00")


@dataclass(frozen=True, slots=True)
class ModelName:
    """Validated threat model name.

    Attributes:
        value: The raw name

    Example:
        >>> ModelName("payments-api").relative_path
        'payments-api/payments-api.json'
        >>> ModelName("../etc")
        Traceback (most recent call last):
        ...
        threat_store.domain.errors.InvalidModelNameError: Invalid model name: '../etc'
    """

    value: str

    def __post_init__(self) -> None:
        """Reject names that are not a single visible path segment."""
        name = self.value
        if (
            not isinstance(name, str)
            or not name
            or len(name) > MAX_NAME_LENGTH
            or name.startswith(HIDDEN_PREFIX)
            or name.strip() != name
            or any(ch in _FORBIDDEN_CHARACTERS or ord(ch) < 0x20 or ch == "\x7f" for ch in name)
        ):
            raise InvalidModelNameError(f"Invalid model name: {name!r}")

    def __str__(self) -> str:
        return self.value

    @property
    def file_name(self) -> str:
        """File name of the model document."""
        return f"{self.value}{MODEL_FILE_SUFFIX}"

    @property
    def relative_path(self) -> str:
        """Repository-relative path of the model file, with '/' separators.

        Git tree paths always use '/', regardless of platform.
        """
        return posixpath.join(self.value, self.file_name)
