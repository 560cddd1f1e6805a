"""
Typed identifier generation for principals.

A principal's identifier representation is chosen by a KeyKind supplied at
construction time. KEY_FACTORIES maps each kind to the callable producing a
fresh value from a RandomSource; kinds without an entry produce no value.
"""

import random
import threading
from typing import Any, Callable, Optional, Protocol, Union
from uuid import UUID, uuid4

from identitygate.errors import InvalidKeyError
from identitygate.models.enums import KeyKind

PrincipalKey = Union[UUID, int, str]

INT16_MAX = 2**15 - 1
INT32_MAX = 2**31 - 1
INT64_MAX = 2**63 - 1


class RandomSource(Protocol):
    """Source of uniform integers and fresh GUIDs."""

    def randint(self, lo: int, hi: int) -> int:
        """Return a uniform integer in [lo, hi]."""
        ...

    def uuid(self) -> UUID:
        """Return a fresh random GUID."""
        ...


class SystemRandomSource:
    """OS entropy backed source. Safe to share between threads."""

    def __init__(self):
        self._random = random.SystemRandom()

    def randint(self, lo: int, hi: int) -> int:
        return self._random.randint(lo, hi)

    def uuid(self) -> UUID:
        return uuid4()


class SeededRandomSource:
    """
    Deterministic source for reproducible identifiers.

    Draws are serialized with a lock so concurrent constructions see a
    consistent sequence.
    """

    def __init__(self, seed: int):
        self.seed = seed
        self._random = random.Random(seed)
        self._lock = threading.Lock()

    def randint(self, lo: int, hi: int) -> int:
        with self._lock:
            return self._random.randint(lo, hi)

    def uuid(self) -> UUID:
        with self._lock:
            bits = self._random.getrandbits(128)
        return UUID(int=bits, version=4)


KEY_FACTORIES: dict[KeyKind, Callable[[RandomSource], PrincipalKey]] = {
    KeyKind.GUID: lambda source: source.uuid(),
    KeyKind.INT16: lambda source: source.randint(1, INT16_MAX),
    KeyKind.INT32: lambda source: source.randint(1, INT32_MAX),
    KeyKind.INT64: lambda source: source.randint(1, INT64_MAX),
    KeyKind.STRING: lambda source: str(source.uuid()),
}


def initialize_key(
    kind: KeyKind,
    random_source: Optional[RandomSource] = None,
) -> Optional[PrincipalKey]:
    """
    Produce an initial identifier of the requested kind.

    Returns None for kinds without a factory (KeyKind.OTHER); callers using
    such a kind must assign the identifier themselves.
    """
    factory = KEY_FACTORIES.get(kind)
    if factory is None:
        return None
    return factory(random_source or get_random_source())


def format_key(key: PrincipalKey) -> str:
    """Return the stored string form of an identifier."""
    return str(key)


def _integer_bound(kind: KeyKind) -> int:
    return {KeyKind.INT16: INT16_MAX, KeyKind.INT32: INT32_MAX, KeyKind.INT64: INT64_MAX}[kind]


def parse_key(kind: KeyKind, raw: str) -> PrincipalKey:
    """Restore a typed identifier from its stored string form."""
    if kind == KeyKind.GUID:
        try:
            return UUID(raw)
        except ValueError:
            raise InvalidKeyError(kind.value, raw) from None
    if kind.is_integer():
        try:
            value = int(raw)
        except ValueError:
            raise InvalidKeyError(kind.value, raw) from None
        upper = _integer_bound(kind)
        if not -upper - 1 <= value <= upper:
            raise InvalidKeyError(kind.value, raw)
        return value
    return raw


def validate_key(kind: KeyKind, key: Any) -> PrincipalKey:
    """
    Check a typed identifier against its key kind and return it.

    GUID keys must be UUIDs, integer keys ints within the signed range of
    their width, STRING keys str. OTHER accepts any value.
    """
    if kind == KeyKind.GUID:
        if not isinstance(key, UUID):
            raise InvalidKeyError(kind.value, str(key))
        return key
    if kind.is_integer():
        if isinstance(key, bool) or not isinstance(key, int):
            raise InvalidKeyError(kind.value, str(key))
        upper = _integer_bound(kind)
        if not -upper - 1 <= key <= upper:
            raise InvalidKeyError(kind.value, str(key))
        return key
    if kind == KeyKind.STRING and not isinstance(key, str):
        raise InvalidKeyError(kind.value, str(key))
    return key


def coerce_key(kind: KeyKind, key: Any) -> PrincipalKey:
    """Accept an identifier either typed or in stored string form."""
    if isinstance(key, str) and kind != KeyKind.STRING:
        return parse_key(kind, key)
    return validate_key(kind, key)


# Process-wide shared source
_random_source: Optional[RandomSource] = None
_random_source_lock = threading.Lock()


def get_random_source() -> RandomSource:
    """Get or create the shared random source."""
    global _random_source
    if _random_source is None:
        with _random_source_lock:
            if _random_source is None:
                from identitygate.config import settings

                if settings.key_random_seed is not None:
                    _random_source = SeededRandomSource(settings.key_random_seed)
                else:
                    _random_source = SystemRandomSource()
    return _random_source


def set_random_source(source: Optional[RandomSource]) -> None:
    """Replace the shared random source (None resets to the configured default)."""
    global _random_source
    with _random_source_lock:
        _random_source = source
