"""Board catalogue: one BoardSpec per supported board shape.

Hex coordinates use the doubled-column grid documented on `Board`:

    Standard                 5-6 Player Expansion
       012345678                01234567890
    0    2 4 6               0     3 5 7
    1   1 3 5 7              1    2 4 6 8
    2  0 2 4 6 8             2   1 3 5 7 9
    3   1 3 5 7              3  0 2 4 6 8 0
    4    2 4 6               4   1 3 5 7 9
                             5    2 4 6 8
                             6     3 5 7

Seafarers layouts shift the middle row in by one column instead of out.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Sequence, Tuple, TypeVar

from .board import BoardSpecError, Coordinate, Dimensions, Hex, Port, ResourceType

if TYPE_CHECKING:
    from .board import Board

T = TypeVar("T")

HexLayout = Callable[[Dimensions], List[Coordinate]]
ResourceRule = Callable[[Hex, ResourceType], bool]
PortDef = Tuple[ResourceType, Tuple[Coordinate, Coordinate]]


class BoardShape(str, Enum):
    STANDARD = "Standard"
    EXPANSION6 = "5-6 Player Expansion"
    SEAFARERS1 = "Seafarers 1: Heading for New Shores"
    SEAFARERS2 = "Seafarers 2: The Four Islands"
    DRAGONS = "The Desert Dragons"


@dataclass(frozen=True)
class BeachConnection:
    coordinate: Coordinate
    label: int


@dataclass(frozen=True)
class ScoreRange:
    """Mean candidate quality of fully greedy and fully fair number placement."""

    greedy: float
    fair: float


def _allow_all(hex_: Hex, resource: ResourceType) -> bool:
    return True


@dataclass(frozen=True)
class BoardSpec:
    shape: BoardShape
    dimensions: Dimensions
    resource_counts: Tuple[Tuple[ResourceType, int], ...]
    roll_number_values: Tuple[int, ...]
    hex_layout: HexLayout
    default_ports: Tuple[PortDef, ...]
    beach_connections: Tuple[BeachConnection, ...] = ()
    required_resources: Tuple[Tuple[ResourceType, Tuple[Coordinate, ...]], ...] = ()
    resource_rule: ResourceRule = _allow_all
    center_coords: Tuple[Coordinate, ...] = ()
    has_default_port_resources: bool = True
    # True when every land hex touches the sea, so inland desert placement means nothing.
    all_coastal_hexes: bool = False
    score_range: Optional[ScoreRange] = None
    name: Optional[str] = None

    @property
    def label(self) -> str:
        return self.name or self.shape.value

    def resources(self) -> List[ResourceType]:
        return create_by_counts(*self.resource_counts)

    def roll_numbers(self) -> List[int]:
        return list(self.roll_number_values)

    def ports(self) -> List[Port]:
        return [Port(resource=resource, corners=corners) for resource, corners in self.default_ports]

    def hexes(self, board: "Board") -> Dict[Coordinate, Hex]:
        grid: Dict[Coordinate, Hex] = {}
        for x, y in self.hex_layout(self.dimensions):
            if (x, y) in grid:
                raise BoardSpecError(f"{self.label}: hex layout repeats coordinate {(x, y)}.")
            grid[(x, y)] = Hex(x=x, y=y)
        return grid

    def is_resource_allowed(self, hex_: Hex, resource: ResourceType) -> bool:
        return self.resource_rule(hex_, resource)

    def required_coordinates(self) -> List[Coordinate]:
        return [coordinate for _, coordinates in self.required_resources for coordinate in coordinates]


def create_by_counts(*value_counts: Tuple[T, int]) -> List[T]:
    """create_by_counts(('a', 3), ('b', 1)) -> ['a', 'a', 'a', 'b']"""
    values: List[T] = []
    for value, count in value_counts:
        values.extend([value] * count)
    return values


def coordinate_pairs(*values: int) -> Tuple[Coordinate, ...]:
    """Groups a flat x0, y0, x1, y1, ... sequence into coordinates."""
    if len(values) % 2:
        raise ValueError("Coordinate pairs need an even number of values.")
    return tuple((values[index], values[index + 1]) for index in range(0, len(values), 2))


AUTO_PORT_RESOURCES: Tuple[ResourceType, ...] = (
    ResourceType.ANY,
    ResourceType.WHEAT,
    ResourceType.BRICK,
    ResourceType.SHEEP,
    ResourceType.ORE,
    ResourceType.WOOD,
    ResourceType.ANY,
)


def generate_ports(*values: int) -> Tuple[PortDef, ...]:
    """Builds ports from flat corner pairs, cycling through AUTO_PORT_RESOURCES.

    Used for boards without printed port resources; those always get shuffled.
    """
    if len(values) % 4:
        raise ValueError("Each port needs exactly two corners.")
    corners = coordinate_pairs(*values)
    ports = []
    for index in range(0, len(corners), 2):
        resource = AUTO_PORT_RESOURCES[(index // 2) % len(AUTO_PORT_RESOURCES)]
        ports.append((resource, (corners[index], corners[index + 1])))
    return tuple(ports)


def generate_standard_shaped_layout(dimensions: Dimensions) -> List[Coordinate]:
    return _generate_layout(dimensions, is_seafarers=False)


def generate_seafarers_layout(dimensions: Dimensions) -> List[Coordinate]:
    return _generate_layout(dimensions, is_seafarers=True)


def _generate_layout(dimensions: Dimensions, *, is_seafarers: bool) -> List[Coordinate]:
    coordinates: List[Coordinate] = []
    middle_row = (dimensions.height - 1) / 2
    for row in range(dimensions.height):
        distance = int(abs(row - middle_row))
        if is_seafarers:
            start = 1 if distance == 0 else distance - 1
        else:
            start = distance
        for index in range(dimensions.width - start):
            coordinates.append((start + 2 * index, row))
    return coordinates


def in_coords(hex_: Hex, coordinates: Sequence[Coordinate]) -> bool:
    return hex_.coordinate in coordinates


def allow_resources_with_main_island_rules(
    island_coords: Sequence[Coordinate], hex_: Hex, resource: ResourceType
) -> bool:
    """Gold only on the sub-islands, deserts only on the main island."""
    if resource is not ResourceType.GOLD and resource is not ResourceType.DESERT:
        return True
    on_island = in_coords(hex_, island_coords)
    if resource is ResourceType.GOLD:
        return on_island
    return not on_island


STANDARD_SEAFARERS_BEACH_CONNECTIONS = tuple(
    BeachConnection(coordinate, label)
    for label, coordinate in enumerate(
        coordinate_pairs(3, 0, 7, 0, 12, 0, 14, 3, 14, 5, 11, 7, 7, 7, 2, 7, 0, 4, 0, 2),
        start=1,
    )
)


def _numbered_connections(*values: int) -> Tuple[BeachConnection, ...]:
    return tuple(
        BeachConnection(coordinate, label)
        for label, coordinate in enumerate(coordinate_pairs(*values), start=1)
    )


# Mean qualities from `catan-generator calibrate --samples 6` with 15 candidates per
# board. Rerun when the scoring constants change.
SCORE_RANGES: Dict[BoardShape, ScoreRange] = {
    BoardShape.STANDARD: ScoreRange(greedy=28.3, fair=12.9),
    BoardShape.EXPANSION6: ScoreRange(greedy=32.1, fair=12.9),
    BoardShape.SEAFARERS1: ScoreRange(greedy=26.6, fair=11.6),
    BoardShape.SEAFARERS2: ScoreRange(greedy=24.0, fair=10.5),
    BoardShape.DRAGONS: ScoreRange(greedy=25.5, fair=10.5),
}


STANDARD = BoardSpec(
    shape=BoardShape.STANDARD,
    dimensions=Dimensions(width=5, height=5),
    resource_counts=(
        (ResourceType.BRICK, 3),
        (ResourceType.DESERT, 1),
        (ResourceType.ORE, 3),
        (ResourceType.SHEEP, 4),
        (ResourceType.WOOD, 4),
        (ResourceType.WHEAT, 4),
    ),
    roll_number_values=(2, 3, 3, 4, 4, 5, 5, 6, 6, 8, 8, 9, 9, 10, 10, 11, 11, 12),
    hex_layout=generate_standard_shaped_layout,
    default_ports=(
        (ResourceType.ANY, ((2, 0), (3, 0))),
        (ResourceType.SHEEP, ((5, 0), (6, 0))),
        (ResourceType.ANY, ((8, 1), (9, 1))),
        (ResourceType.ANY, ((10, 2), (10, 3))),
        (ResourceType.BRICK, ((9, 4), (8, 4))),
        (ResourceType.WOOD, ((6, 5), (5, 5))),
        (ResourceType.ORE, ((1, 2), (1, 1))),
        (ResourceType.ANY, ((3, 5), (2, 5))),
        (ResourceType.WHEAT, ((1, 4), (1, 3))),
    ),
    beach_connections=(
        BeachConnection((7, 0), 1),
        BeachConnection((10, 2), 2),
        BeachConnection((8, 5), 3),
        BeachConnection((3, 5), 4),
        BeachConnection((0, 3), 5),
        BeachConnection((2, 0), 6),
    ),
    center_coords=((4, 2),),
    score_range=SCORE_RANGES[BoardShape.STANDARD],
)

EXPANSION6 = BoardSpec(
    shape=BoardShape.EXPANSION6,
    dimensions=Dimensions(width=6, height=7),
    resource_counts=(
        (ResourceType.BRICK, 5),
        (ResourceType.DESERT, 2),
        (ResourceType.ORE, 5),
        (ResourceType.SHEEP, 6),
        (ResourceType.WOOD, 6),
        (ResourceType.WHEAT, 6),
    ),
    roll_number_values=tuple(
        create_by_counts((2, 2), (3, 3), (4, 3), (5, 3), (6, 3), (8, 3), (9, 3), (10, 3), (11, 3), (12, 2))
    ),
    hex_layout=generate_standard_shaped_layout,
    default_ports=(
        (ResourceType.ANY, ((3, 0), (4, 0))),
        (ResourceType.SHEEP, ((6, 0), (7, 0))),
        (ResourceType.ANY, ((9, 1), (10, 1))),
        (ResourceType.ANY, ((12, 3), (12, 4))),
        (ResourceType.BRICK, ((11, 5), (10, 5))),
        (ResourceType.SHEEP, ((9, 6), (9, 7))),
        (ResourceType.WOOD, ((7, 7), (6, 7))),
        (ResourceType.ANY, ((4, 7), (3, 7))),
        (ResourceType.WHEAT, ((2, 6), (2, 5))),
        (ResourceType.ANY, ((1, 4), (0, 4))),
        (ResourceType.ORE, ((1, 3), (1, 2))),
    ),
    beach_connections=(
        BeachConnection((8, 0), 1),
        BeachConnection((12, 3), 2),
        BeachConnection((9, 7), 3),
        BeachConnection((4, 7), 4),
        BeachConnection((0, 4), 5),
        BeachConnection((3, 0), 6),
    ),
    center_coords=((4, 3), (6, 3)),
    score_range=SCORE_RANGES[BoardShape.EXPANSION6],
)

SEAFARERS1 = BoardSpec(
    shape=BoardShape.SEAFARERS1,
    dimensions=Dimensions(width=7, height=7),
    resource_counts=(
        (ResourceType.BRICK, 4),
        (ResourceType.DESERT, 1),
        (ResourceType.ORE, 5),
        (ResourceType.SHEEP, 5),
        (ResourceType.WOOD, 5),
        (ResourceType.WHEAT, 5),
        (ResourceType.GOLD, 2),
    ),
    roll_number_values=(
        # Main island.
        2, 3, 3, 4, 4, 5, 5, 6, 6, 8, 8, 9, 9, 10, 10, 11, 11, 12,
        # Sub-islands.
        9, 2, 10, 8, 3, 4, 5, 11,
    ),
    hex_layout=generate_seafarers_layout,
    default_ports=generate_ports(
        11, 0, 12, 0,
        8, 0, 9, 0,
        5, 1, 6, 1,
        4, 3, 4, 2,
        13, 1, 13, 2,
        13, 3, 13, 4,
        6, 4, 5, 4,
        9, 5, 8, 5,
        12, 5, 11, 5,
    ),
    beach_connections=_numbered_connections(0, 2, 3, 0, 7, 0, 12, 0, 14, 3, 14, 5, 11, 7, 7, 7, 2, 7, 0, 4),
    required_resources=(
        (
            ResourceType.WATER,
            coordinate_pairs(
                4, 0, 1, 1, 3, 1, 2, 2, 3, 3, 0, 4, 2, 4, 4, 4,
                12, 4, 3, 5, 5, 5, 7, 5, 9, 5, 11, 5, 6, 6,
            ),
        ),
    ),
    resource_rule=partial(
        allow_resources_with_main_island_rules,
        coordinate_pairs(2, 0, 0, 2, 1, 3, 1, 5, 2, 6, 4, 6, 8, 6, 10, 6),
    ),
    center_coords=((8, 2),),
    has_default_port_resources=False,
    score_range=SCORE_RANGES[BoardShape.SEAFARERS1],
)

SEAFARERS2 = BoardSpec(
    shape=BoardShape.SEAFARERS2,
    dimensions=Dimensions(width=7, height=7),
    resource_counts=(
        (ResourceType.BRICK, 4),
        (ResourceType.DESERT, 2),
        (ResourceType.ORE, 4),
        (ResourceType.SHEEP, 5),
        (ResourceType.WOOD, 4),
        (ResourceType.WHEAT, 4),
    ),
    roll_number_values=(2, 3, 3, 4, 4, 4, 5, 5, 6, 6, 8, 8, 9, 9, 9, 10, 10, 10, 11, 11, 12),
    hex_layout=generate_seafarers_layout,
    default_ports=generate_ports(
        2, 0, 3, 0,
        5, 0, 6, 0,
        10, 0, 11, 0,
        1, 2, 1, 1,
        9, 1, 8, 1,
        4, 3, 3, 3,
        9, 5, 8, 5,
        13, 5, 13, 6,
        12, 7, 11, 7,
        5, 7, 4, 7,
    ),
    beach_connections=STANDARD_SEAFARERS_BEACH_CONNECTIONS,
    required_resources=(
        (
            ResourceType.WATER,
            coordinate_pairs(
                6, 0, 5, 1, 7, 1, 6, 2, 10, 2, 12, 2, 1, 3, 3, 3, 5, 3, 7, 3,
                9, 3, 11, 3, 0, 4, 2, 4, 4, 4, 6, 4, 5, 5, 7, 5, 6, 6,
            ),
        ),
    ),
    has_default_port_resources=False,
    all_coastal_hexes=True,
    score_range=SCORE_RANGES[BoardShape.SEAFARERS2],
)

DRAGONS = BoardSpec(
    shape=BoardShape.DRAGONS,
    dimensions=Dimensions(width=9, height=7),
    resource_counts=(
        (ResourceType.BRICK, 5),
        (ResourceType.DESERT, 1),
        (ResourceType.ORE, 5),
        (ResourceType.SHEEP, 5),
        (ResourceType.WOOD, 6),
        (ResourceType.WHEAT, 6),
        (ResourceType.GOLD, 2),
    ),
    roll_number_values=(
        12, 3, 8, 9, 4, 6, 5, 4, 10, 11, 9, 6, 11, 10, 5, 3, 8, 11, 8, 3, 4, 9, 5,
        3, 10, 10, 5, 2, 6,
    ),
    hex_layout=generate_seafarers_layout,
    default_ports=generate_ports(
        1, 1, 2, 1,
        3, 0, 4, 0,
        6, 0, 7, 0,
        9, 0, 10, 0,
        12, 0, 13, 0,
        1, 4, 1, 3,
        1, 6, 1, 5,
        3, 6, 4, 6,
    ),
    beach_connections=_numbered_connections(
        3, 0, 7, 0, 11, 0, 16, 0, 18, 3, 18, 5, 15, 7, 11, 7, 7, 7, 2, 7, 0, 4, 0, 2
    ),
    required_resources=(
        (
            ResourceType.WATER,
            coordinate_pairs(
                14, 0, 9, 1, 11, 1, 13, 1, 15, 1, 6, 2, 8, 2, 10, 2, 12, 2, 14, 2, 16, 2,
                5, 3, 7, 3, 15, 3, 4, 4, 6, 4, 16, 4, 3, 5, 5, 5, 4, 6, 6, 6,
            ),
        ),
        (ResourceType.DESERT, coordinate_pairs(10, 4, 12, 4, 9, 5, 11, 5, 13, 5)),
    ),
    resource_rule=partial(
        allow_resources_with_main_island_rules,
        # The dragon island.
        coordinate_pairs(9, 3, 11, 3, 13, 3, 8, 4, 14, 4, 7, 5, 15, 5, 8, 6, 10, 6, 12, 6, 14, 6),
    ),
    has_default_port_resources=False,
    score_range=SCORE_RANGES[BoardShape.DRAGONS],
)


BOARD_SPECS: Dict[BoardShape, BoardSpec] = {
    BoardShape.STANDARD: STANDARD,
    BoardShape.EXPANSION6: EXPANSION6,
    BoardShape.SEAFARERS1: SEAFARERS1,
    BoardShape.SEAFARERS2: SEAFARERS2,
    BoardShape.DRAGONS: DRAGONS,
}

# Single-character shape markers for board tokens. Must stay unique and stable.
SHAPE_URL_KEYS: Dict[BoardShape, str] = {
    BoardShape.STANDARD: "s",
    BoardShape.EXPANSION6: "e",
    BoardShape.SEAFARERS1: "1",
    BoardShape.SEAFARERS2: "2",
    BoardShape.DRAGONS: "d",
}


def get_spec(shape: BoardShape | str) -> BoardSpec:
    """Looks a spec up by shape, enum name (`standard`) or display label."""
    if isinstance(shape, BoardShape):
        return BOARD_SPECS[shape]
    normalized = shape.strip()
    for candidate in BoardShape:
        if normalized.upper() == candidate.name or normalized == candidate.value:
            return BOARD_SPECS[candidate]
    raise ValueError(f"Unknown board shape '{shape}'. Available: {', '.join(s.name.lower() for s in BoardShape)}")
