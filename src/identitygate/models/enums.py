"""IdentityGate enumerations."""

from enum import Enum


class KeyKind(str, Enum):
    """Identifier representation used by a principal."""

    GUID = "guid"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    STRING = "string"
    OTHER = "other"

    @classmethod
    def integer_kinds(cls) -> set["KeyKind"]:
        """Return the integer-backed key kinds."""
        return {cls.INT16, cls.INT32, cls.INT64}

    def is_integer(self) -> bool:
        """Check if keys of this kind are integers."""
        return self in self.integer_kinds()
