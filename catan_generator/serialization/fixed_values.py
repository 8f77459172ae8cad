"""Compact encoding for sequences drawn from a known multiset of values.

Each value is written as its 1-based rank in the set of values that can still
occur, and the ranks are packed into one mixed-radix integer. Once the last
occurrence of a value has been written it leaves the set, so every following
digit uses a smaller radix. Integers are cut into blocks below
``MAX_BLOCK_INTEGER`` and each block is written as ``BLOCK_SIZE`` base-62
characters (the last block is not padded).

Decoding needs the same multiset (the "entry set") that was encoded, because
the shrinking radix depends on how many of each value remain.
"""

from __future__ import annotations

import string
from typing import Generic, Hashable, List, Sequence, TypeVar

ALPHABET = string.digits + string.ascii_lowercase + string.ascii_uppercase
BASE = len(ALPHABET)
BLOCK_SIZE = 8
# 62**8 stays below 2**53, so a block also fits a double-based decoder.
MAX_BLOCK_INTEGER = BASE**BLOCK_SIZE

V = TypeVar("V", bound=Hashable)

_DIGITS = {char: index for index, char in enumerate(ALPHABET)}


class DecodeError(ValueError):
    """Raised when an encoded string does not match the entry set it is decoded against."""


def encode_block(number: int, width: int = 0) -> str:
    if number < 0:
        raise ValueError("Blocks are non-negative integers.")
    chars = []
    while number:
        number, digit = divmod(number, BASE)
        chars.append(ALPHABET[digit])
    return "".join(reversed(chars)).rjust(width, "0") or "0"


def decode_block(text: str) -> int:
    number = 0
    for char in text:
        try:
            number = number * BASE + _DIGITS[char]
        except KeyError:
            raise DecodeError(f"{char!r} is not a base-62 character.") from None
    return number


class FixedValuesSerializer(Generic[V]):
    def __init__(self, value_set: Sequence[V]) -> None:
        if len(set(value_set)) != len(value_set):
            raise ValueError("value_set must not contain duplicates.")
        self.value_set = tuple(value_set)

    def serialize(self, values: Sequence[V]) -> str:
        blocks = self._to_block_numbers(values)
        return "".join(
            encode_block(block, BLOCK_SIZE if index < len(blocks) - 1 else 0)
            for index, block in enumerate(blocks)
        )

    def deserialize(self, serialized: str, entry_set: Sequence[V]) -> List[V]:
        """Decodes `serialized`, consuming one entry of `entry_set` per value.

        `entry_set` is not modified. Raises DecodeError when the string and the
        entry set disagree.
        """
        entries_left = list(entry_set)
        value_set = list(self.value_set)
        values: List[V] = []

        for start in range(0, len(serialized), BLOCK_SIZE):
            block = decode_block(serialized[start : start + BLOCK_SIZE])
            while block > 0:
                if not entries_left:
                    raise DecodeError("Ran out of entries before the string was consumed.")
                if not value_set:
                    raise DecodeError("Ran out of values before the string was consumed.")
                block, rank = divmod(block, len(value_set) + 1)
                if not 1 <= rank <= len(value_set):
                    raise DecodeError(f"Unexpected value rank {rank}.")

                value = value_set[rank - 1]
                try:
                    entries_left.remove(value)
                except ValueError:
                    raise DecodeError(f"{value!r} is not in the entry set.") from None
                if value not in entries_left:
                    value_set.remove(value)
                values.append(value)

        if entries_left:
            raise DecodeError(f"{len(entries_left)} entries left after decoding.")
        return values

    def _to_block_numbers(self, values: Sequence[V]) -> List[int]:
        values_left = list(values)
        value_set = list(self.value_set)

        blocks: List[int] = []
        block = 0
        scalar = 1
        for value in values:
            try:
                rank = value_set.index(value) + 1
            except ValueError:
                raise ValueError(f"Cannot encode {value!r}: not in the value set.") from None

            if block + rank * scalar >= MAX_BLOCK_INTEGER:
                blocks.append(block)
                block = 0
                scalar = 1

            block += rank * scalar
            scalar *= len(value_set) + 1

            values_left.pop(0)
            if value not in values_left:
                value_set.remove(value)

        if scalar > 1:
            blocks.append(block)
        return blocks
