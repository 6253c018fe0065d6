"""Value objects for the threat model domain."""

from threat_store.domain.value_objects.model_name import (
    HIDDEN_PREFIX,
    MAX_NAME_LENGTH,
    MODEL_FILE_SUFFIX,
    ModelName,
)

__all__ = [
    "HIDDEN_PREFIX",
    "MAX_NAME_LENGTH",
    "MODEL_FILE_SUFFIX",
    "ModelName",
]
