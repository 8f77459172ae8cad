from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Sequence, Set, Tuple

if TYPE_CHECKING:
    from .specs import BoardSpec

Coordinate = Tuple[int, int]
EdgeKey = Tuple[Coordinate, Coordinate]


class BoardSpecError(ValueError):
    """Raised when a BoardSpec does not agree with the hex grid it generates."""


class ResourceType(str, Enum):
    ANY = "any"  # 3:1 ports only.
    BRICK = "brick"
    DESERT = "desert"
    GOLD = "gold"
    ORE = "ore"
    SHEEP = "sheep"
    WATER = "water"
    WOOD = "wood"
    WHEAT = "wheat"


ROLL_NUMBERS: Tuple[int, ...] = (2, 3, 4, 5, 6, 8, 9, 10, 11, 12)
RED_NUMBERS = frozenset({6, 8})

NO_NUMBER_RESOURCES = frozenset({ResourceType.DESERT, ResourceType.WATER})

# Offsets from a hex to its neighbors on the doubled-column grid.
_NEIGHBOR_OFFSETS: Tuple[Coordinate, ...] = ((-2, 0), (2, 0), (-1, -1), (1, -1), (-1, 1), (1, 1))
# Offsets from a hex to its corners: NW, N, NE, SW, S, SE.
_CORNER_OFFSETS: Tuple[Coordinate, ...] = ((0, 0), (1, 0), (2, 0), (0, 1), (1, 1), (2, 1))


@dataclass(frozen=True)
class Dimensions:
    width: int
    height: int


@dataclass
class Port:
    resource: ResourceType
    corners: Tuple[Coordinate, Coordinate]


@dataclass(eq=False)
class Corner:
    """A hex intersection, on a grid one unit larger than the hex grid in both axes.

    A board made of a single hex has the corners NW (0,0), N (1,0), NE (2,0),
    SW (0,1), S (1,1) and SE (2,1). The N and S tips share a row with their
    neighbours, so the corner grid has no gaps.
    """

    x: int
    y: int
    port: Optional[Port] = None
    score: Optional[float] = None
    notes: str = ""
    hexes: Tuple["Hex", ...] = field(default=(), repr=False)

    @property
    def coordinate(self) -> Coordinate:
        return (self.x, self.y)

    @property
    def is_coastal(self) -> bool:
        return len(self.hexes) < 3


@dataclass(eq=False)
class Hex:
    x: int
    y: int
    resource: Optional[ResourceType] = None
    roll_number: Optional[int] = None
    score: Optional[float] = None
    immutable: bool = False
    neighbors: Tuple["Hex", ...] = field(default=(), repr=False)
    corners: Tuple[Corner, ...] = field(default=(), repr=False)

    @property
    def coordinate(self) -> Coordinate:
        return (self.x, self.y)

    @property
    def is_coastal(self) -> bool:
        if len(self.neighbors) < 6:
            return True
        return any(neighbor.resource is ResourceType.WATER for neighbor in self.neighbors)

    @property
    def is_productive(self) -> bool:
        return self.resource is not None and self.resource not in NO_NUMBER_RESOURCES

    def neighbor_resources(self) -> List[ResourceType]:
        return [neighbor.resource for neighbor in self.neighbors if neighbor.resource is not None]

    def typed_port_resources(self) -> Set[ResourceType]:
        """Resources of the 2:1 ports reachable from this hex. 3:1 ports are left out."""
        return {
            corner.port.resource
            for corner in self.corners
            if corner.port is not None and corner.port.resource is not ResourceType.ANY
        }

    def reset(self) -> None:
        self.resource = None
        self.roll_number = None
        self.score = None


@dataclass(frozen=True)
class Beach:
    # Labels of the connectors on either end, in clockwise order.
    connections: Tuple[int, int]
    corners: Tuple[Coordinate, ...]
    ports: Tuple[Port, ...]


@dataclass(frozen=True)
class BoardLayout:
    """The generated state of a board: one entry per mutable hex, one per port."""

    resources: Tuple[Optional[ResourceType], ...]
    roll_numbers: Tuple[Optional[int], ...]
    port_resources: Tuple[ResourceType, ...]


class Board:
    def __init__(self, spec: "BoardSpec") -> None:
        self.spec = spec
        self.shape = spec.shape
        self.dimensions = spec.dimensions
        self._hex_grid: Dict[Coordinate, Hex] = spec.hexes(self)
        if not self._hex_grid:
            raise BoardSpecError(f"{spec.label}: hex layout is empty.")

        self.ports: List[Port] = spec.ports()
        self._default_port_resources = tuple(port.resource for port in self.ports)
        self._corner_grid: Dict[Coordinate, Corner] = {}
        self._edges: Dict[EdgeKey, int] = {}
        self._link()
        self._attach_ports()

        self.hexes: Tuple[Hex, ...] = tuple(
            sorted(self._hex_grid.values(), key=lambda hex_: (hex_.y, hex_.x))
        )
        self.corners: Tuple[Corner, ...] = tuple(
            sorted(self._corner_grid.values(), key=lambda corner: (corner.y, corner.x))
        )
        self._required: Dict[Coordinate, ResourceType] = self._collect_required()
        for coordinate in self._required:
            self._hex_grid[coordinate].immutable = True
        self.mutable_hexes: Tuple[Hex, ...] = tuple(hex_ for hex_ in self.hexes if not hex_.immutable)

        self._validate()
        self.reset()

    def get_hex(self, x: int, y: int) -> Optional[Hex]:
        return self._hex_grid.get((x, y))

    def get_corner(self, x: int, y: int) -> Optional[Corner]:
        return self._corner_grid.get((x, y))

    def reset(self) -> None:
        """Clear all generated state and re-apply the fixed resources."""
        for hex_ in self.hexes:
            hex_.reset()
            required = self._required.get(hex_.coordinate)
            if required is not None:
                hex_.resource = required
        for corner in self.corners:
            corner.score = None
            corner.notes = ""
        for port, resource in zip(self.ports, self._default_port_resources):
            port.resource = resource

    @property
    def default_port_resources(self) -> Tuple[ResourceType, ...]:
        return self._default_port_resources

    def has_default_ports(self) -> bool:
        return tuple(port.resource for port in self.ports) == self._default_port_resources

    def set_port_resources(self, resources: Sequence[ResourceType]) -> None:
        if len(resources) != len(self.ports):
            raise ValueError(f"Expected {len(self.ports)} port resources, received {len(resources)}.")
        for port, resource in zip(self.ports, resources):
            port.resource = resource

    def snapshot(self) -> BoardLayout:
        return BoardLayout(
            resources=tuple(hex_.resource for hex_ in self.mutable_hexes),
            roll_numbers=tuple(hex_.roll_number for hex_ in self.mutable_hexes),
            port_resources=tuple(port.resource for port in self.ports),
        )

    def apply_layout(self, layout: BoardLayout) -> None:
        if len(layout.resources) != len(self.mutable_hexes) or len(layout.roll_numbers) != len(
            self.mutable_hexes
        ):
            raise ValueError("Layout does not match the mutable hexes of this board.")
        self.reset()
        for hex_, resource, roll_number in zip(self.mutable_hexes, layout.resources, layout.roll_numbers):
            hex_.resource = resource
            hex_.roll_number = roll_number
        self.set_port_resources(layout.port_resources)

    def coastal_corners(self) -> List[Corner]:
        return [corner for corner in self.corners if corner.is_coastal]

    def perimeter_edges(self) -> List[EdgeKey]:
        return [edge for edge, owners in self._edges.items() if owners == 1]

    def perimeter_corners(self, start: Optional[Coordinate] = None) -> List[Coordinate]:
        """Walk the outer edge of the hex footprint clockwise, once around.

        The walk starts at `start` (default: the top-left perimeter corner).
        """
        adjacency: Dict[Coordinate, List[Coordinate]] = {}
        for first, second in self.perimeter_edges():
            adjacency.setdefault(first, []).append(second)
            adjacency.setdefault(second, []).append(first)
        for coordinate, neighbors in adjacency.items():
            if len(neighbors) != 2:
                raise BoardSpecError(
                    f"{self.spec.label}: perimeter pinches at corner {coordinate}; "
                    "the footprint has no single coastline."
                )

        origin = min(adjacency, key=lambda item: (item[1], item[0]))
        # Moving right along the top row is clockwise.
        step = max(adjacency[origin], key=lambda item: (item[1] == origin[1], item[0]))
        cycle = [origin]
        previous, current = origin, step
        while current != origin:
            cycle.append(current)
            first, second = adjacency[current]
            previous, current = current, (second if first == previous else first)

        if len(cycle) != len(adjacency):
            raise BoardSpecError(f"{self.spec.label}: the footprint has more than one coastline.")
        if start is None:
            return cycle
        if start not in adjacency:
            raise BoardSpecError(f"{self.spec.label}: {start} is not a perimeter corner.")
        index = cycle.index(start)
        return cycle[index:] + cycle[:index]

    def beaches(self) -> List[Beach]:
        connections = self.spec.beach_connections
        if len(connections) < 2:
            return []
        cycle = self.perimeter_corners(start=connections[0].coordinate)
        positions = {coordinate: index for index, coordinate in enumerate(cycle)}
        for connection in connections:
            if connection.coordinate not in positions:
                raise BoardSpecError(
                    f"{self.spec.label}: beach connection {connection.coordinate} is not on the coastline."
                )

        beaches: List[Beach] = []
        for index, connection in enumerate(connections):
            following = connections[(index + 1) % len(connections)]
            begin = positions[connection.coordinate]
            end = positions[following.coordinate]
            if end <= begin:
                end += len(cycle)
            corners = tuple(cycle[position % len(cycle)] for position in range(begin, end + 1))
            on_beach = set(corners)
            ports = tuple(
                port for port in self.ports if port.corners[0] in on_beach and port.corners[1] in on_beach
            )
            beaches.append(Beach(connections=(connection.label, following.label), corners=corners, ports=ports))
        return beaches

    def _link(self) -> None:
        corner_hexes: Dict[Coordinate, List[Hex]] = {}
        for hex_ in sorted(self._hex_grid.values(), key=lambda item: (item.y, item.x)):
            corner_coordinates = [(hex_.x + dx, hex_.y + dy) for dx, dy in _CORNER_OFFSETS]
            for coordinate in corner_coordinates:
                if coordinate not in self._corner_grid:
                    self._corner_grid[coordinate] = Corner(x=coordinate[0], y=coordinate[1])
                corner_hexes.setdefault(coordinate, []).append(hex_)
            hex_.corners = tuple(self._corner_grid[coordinate] for coordinate in corner_coordinates)
            hex_.neighbors = tuple(
                self._hex_grid[(hex_.x + dx, hex_.y + dy)]
                for dx, dy in _NEIGHBOR_OFFSETS
                if (hex_.x + dx, hex_.y + dy) in self._hex_grid
            )
            for edge in _hex_edges(hex_.x, hex_.y):
                self._edges[edge] = self._edges.get(edge, 0) + 1

        for coordinate, hexes in corner_hexes.items():
            self._corner_grid[coordinate].hexes = tuple(hexes)

    def _attach_ports(self) -> None:
        for port in self.ports:
            for coordinate in port.corners:
                corner = self._corner_grid.get(tuple(coordinate))
                if corner is None:
                    raise BoardSpecError(
                        f"{self.spec.label}: port corner {coordinate} is not on the board."
                    )
                if corner.port is None:
                    corner.port = port

    def _collect_required(self) -> Dict[Coordinate, ResourceType]:
        listed = self.spec.required_coordinates()
        if len(set(listed)) != len(listed):
            raise BoardSpecError(f"{self.spec.label}: a required hex is listed more than once.")
        required: Dict[Coordinate, ResourceType] = {}
        for resource, coordinates in self.spec.required_resources:
            for coordinate in coordinates:
                if coordinate not in self._hex_grid:
                    raise BoardSpecError(
                        f"{self.spec.label}: required {resource.value} hex {coordinate} is not on the board."
                    )
                required[coordinate] = resource
        return required

    def _validate(self) -> None:
        resources = self.spec.resources()
        if len(resources) != len(self.mutable_hexes):
            raise BoardSpecError(
                f"{self.spec.label}: expected {len(self.mutable_hexes)} resources, "
                f"spec provides {len(resources)}."
            )
        numbered = sum(1 for resource in resources if resource not in NO_NUMBER_RESOURCES)
        roll_numbers = self.spec.roll_numbers()
        if len(roll_numbers) != numbered:
            raise BoardSpecError(
                f"{self.spec.label}: expected {numbered} roll numbers, spec provides {len(roll_numbers)}."
            )
        unknown = sorted(set(roll_numbers) - set(ROLL_NUMBERS))
        if unknown:
            raise BoardSpecError(f"{self.spec.label}: invalid roll numbers {unknown}.")
        for coordinate in self.spec.center_coords:
            if coordinate not in self._hex_grid:
                raise BoardSpecError(f"{self.spec.label}: center hex {coordinate} is not on the board.")


def _hex_edges(x: int, y: int) -> Iterable[EdgeKey]:
    top = [(x, y), (x + 1, y), (x + 2, y)]
    bottom = [(x, y + 1), (x + 1, y + 1), (x + 2, y + 1)]
    yield (top[0], top[1])
    yield (top[1], top[2])
    yield (bottom[0], bottom[1])
    yield (bottom[1], bottom[2])
    yield (top[0], bottom[0])
    yield (top[2], bottom[2])
