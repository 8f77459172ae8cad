"""Board <-> URL token.

Format: ``0<shape-key><hex-resources>-<roll-numbers>[-<port-resources>]``.
The leading ``0`` is the format version. The port block is only written when
the ports differ from the shape's defaults.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple, TypeVar

from catan_generator.domain.board import NO_NUMBER_RESOURCES, ROLL_NUMBERS, Board, ResourceType
from catan_generator.domain.specs import BOARD_SPECS, SHAPE_URL_KEYS, BoardShape

from .fixed_values import DecodeError, FixedValuesSerializer

FORMAT_VERSION = "0"
SEPARATOR = "-"

PORT_RESOURCES = (
    ResourceType.ANY,
    ResourceType.BRICK,
    ResourceType.ORE,
    ResourceType.SHEEP,
    ResourceType.WHEAT,
    ResourceType.WOOD,
)
HEX_RESOURCES = (
    ResourceType.DESERT,
    ResourceType.BRICK,
    ResourceType.ORE,
    ResourceType.SHEEP,
    ResourceType.WHEAT,
    ResourceType.WOOD,
    ResourceType.GOLD,
)
ROLL_NUMBER_VALUES: Tuple[Optional[int], ...] = (None, *ROLL_NUMBERS)

port_resource_serializer = FixedValuesSerializer(PORT_RESOURCES)
hex_resource_serializer = FixedValuesSerializer(HEX_RESOURCES)
roll_number_serializer = FixedValuesSerializer(ROLL_NUMBER_VALUES)

_SHAPES_BY_KEY = {key: shape for shape, key in SHAPE_URL_KEYS.items()}

T = TypeVar("T")


class UnsupportedFormatError(ValueError):
    """Raised for tokens this version cannot read; callers usually generate a fresh board instead."""


def serialize(board: Board) -> str:
    hexes = board.mutable_hexes
    if any(hex_.resource is None for hex_ in hexes):
        raise ValueError("Cannot serialize a board with unset hexes.")
    if any(_number_mismatch(hex_.resource, hex_.roll_number) for hex_ in hexes):
        raise ValueError("Cannot serialize a board whose roll numbers do not match its resources.")

    token = (
        FORMAT_VERSION
        + SHAPE_URL_KEYS[board.shape]
        + hex_resource_serializer.serialize([hex_.resource for hex_ in hexes])
        + SEPARATOR
        + roll_number_serializer.serialize([hex_.roll_number for hex_ in hexes])
    )
    if not board.has_default_ports():
        token += SEPARATOR + port_resource_serializer.serialize([port.resource for port in board.ports])
    return token


def deserialize(token: str) -> Board:
    """Rebuilds the board a token was made from.

    Raises UnsupportedFormatError for an unknown version or shape key, and
    DecodeError when a block does not fit the shape it names.
    """
    shape = _read_header(token)
    parts = token[2:].split(SEPARATOR)
    if len(parts) not in (2, 3):
        raise UnsupportedFormatError(f"Malformed board token {token!r}.")

    spec = BOARD_SPECS[shape]
    board = Board(spec)
    hexes = board.mutable_hexes

    resource_entries = spec.resources()
    roll_entries: List[Optional[int]] = list(spec.roll_numbers())
    roll_entries.extend(None for resource in resource_entries if resource in NO_NUMBER_RESOURCES)

    resources = _decode(hex_resource_serializer, parts[0], resource_entries, len(hexes), "hex resources")
    roll_numbers = _decode(roll_number_serializer, parts[1], roll_entries, len(hexes), "roll numbers")
    for hex_, resource, roll_number in zip(hexes, resources, roll_numbers):
        if _number_mismatch(resource, roll_number):
            raise DecodeError(f"Hex {hex_.coordinate} cannot hold {resource.value} with roll number {roll_number}.")
        hex_.resource = resource
        hex_.roll_number = roll_number

    # A missing port block means the shape's default ports.
    if len(parts) == 3:
        board.set_port_resources(
            _decode(
                port_resource_serializer,
                parts[2],
                list(board.default_port_resources),
                len(board.ports),
                "port resources",
            )
        )
    return board


def has_custom_ports(token: str) -> bool:
    return len(token.split(SEPARATOR)) > 2


def _read_header(token: str) -> BoardShape:
    if len(token) < 2:
        raise UnsupportedFormatError(f"Malformed board token {token!r}.")
    if token[0] != FORMAT_VERSION:
        raise UnsupportedFormatError(f"Unsupported board token version {token[0]!r}.")
    try:
        return _SHAPES_BY_KEY[token[1]]
    except KeyError:
        raise UnsupportedFormatError(f"Unsupported board shape {token[1]!r}.") from None


def _decode(
    serializer: FixedValuesSerializer[T],
    block: str,
    entries: Sequence[T],
    expected: int,
    label: str,
) -> List[T]:
    values = serializer.deserialize(block, entries)
    if len(values) != expected:
        raise DecodeError(f"Expected {expected} {label}, decoded {len(values)}.")
    return values


def _number_mismatch(resource: ResourceType, roll_number: Optional[int]) -> bool:
    return (resource in NO_NUMBER_RESOURCES) != (roll_number is None)
