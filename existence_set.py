"""
Open-addressing string set with double hashing.

Used three ways by the decoder: dictionary words, word prefixes (for pruning)
and phrases that have already been processed. Keys can only be added; there
is no deletion, so an empty slot always ends a probe sequence.
"""

from __future__ import annotations
from typing import Callable, Iterable, Iterator, List, Optional
import zlib

# ============================================================================ #
#                              CONFIGURATION                                   #
# ============================================================================ #

DEFAULT_CAPACITY = 100003
MAX_LOAD_FACTOR = 0.70
SKIP_PREFIX_LENGTH = 3  # characters summed to get the probe step
SKIP_MODULUS = 30


# ============================================================================ #
#                              HASHING                                         #
# ============================================================================ #

def string_hash(key: str) -> int:
    """CRC-32 of the UTF-8 bytes. Stable across processes, unlike hash()."""
    return zlib.crc32(key.encode("utf-8", "surrogatepass"))


def skip_value(key: str) -> int:
    """
    Probe step for a key, always in [1, SKIP_MODULUS].
    e.g., 'cat' -> (99 + 97 + 116) % 30 + 1 = 13
    """
    total = sum(ord(ch) for ch in key[:SKIP_PREFIX_LENGTH])
    return (total % SKIP_MODULUS) + 1


# ============================================================================ #
#                              EXISTENCE SET                                   #
# ============================================================================ #

class ExistenceSet:
    """Hash set of strings with idempotent insert and automatic growth."""

    def __init__(
        self,
        keys: Iterable[str] = (),
        *,
        capacity: int = DEFAULT_CAPACITY,
        hash_func: Callable[[str], int] = string_hash,
    ) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._slots: List[Optional[str]] = [None] * capacity
        self._used = 0
        self._hash = hash_func
        self.update(keys)

    @property
    def capacity(self) -> int:
        return len(self._slots)

    @property
    def used(self) -> int:
        return self._used

    @property
    def load_factor(self) -> float:
        return self._used / len(self._slots)

    def __len__(self) -> int:
        return self._used

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.contains(key)

    def __iter__(self) -> Iterator[str]:
        return (key for key in self._slots if key is not None)

    def __repr__(self) -> str:
        return f"ExistenceSet(used={self._used}, capacity={self.capacity})"

    def _primary_index(self, key: str, capacity: int) -> int:
        return abs(self._hash(key)) % capacity

    def _place(self, slots: List[Optional[str]], key: str) -> bool:
        """Store key in the first empty slot of its probe sequence. False if none."""
        capacity = len(slots)
        index = self._primary_index(key, capacity)
        if slots[index] is None:
            slots[index] = key
            return True

        skip = skip_value(key)
        for _ in range(capacity):
            index = (index + skip) % capacity
            if slots[index] is None:
                slots[index] = key
                return True
        return False

    def _resize(self) -> None:
        new_capacity = len(self._slots) * 2
        while True:
            new_slots: List[Optional[str]] = [None] * new_capacity
            if all(self._place(new_slots, key) for key in self):
                break
            # A key ran out of probes in the new table too; go bigger.
            new_capacity *= 2
        self._slots = new_slots

    def contains(self, key: str) -> bool:
        slots = self._slots
        capacity = len(slots)
        index = self._primary_index(key, capacity)
        current = slots[index]
        if current is None:
            return False
        if current == key:
            return True

        skip = skip_value(key)
        for _ in range(capacity):
            index = (index + skip) % capacity
            current = slots[index]
            if current is None:
                return False
            if current == key:
                return True
        return False

    def insert(self, key: str) -> bool:
        """Add key if absent. Returns True when the key was new."""
        if self.contains(key):
            return False

        if self.load_factor > MAX_LOAD_FACTOR:
            self._resize()

        while not self._place(self._slots, key):
            self._resize()

        self._used += 1
        return True

    add = insert

    def update(self, keys: Iterable[str]) -> None:
        for key in keys:
            self.insert(key)
