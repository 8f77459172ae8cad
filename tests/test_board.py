import dataclasses
import unittest

from catan_generator.domain.board import Board, BoardSpecError, ResourceType
from catan_generator.domain.specs import (
    BOARD_SPECS,
    SHAPE_URL_KEYS,
    STANDARD,
    BoardShape,
    create_by_counts,
    get_spec,
)


class BoardGraphTests(unittest.TestCase):
    def test_standard_board_hex_and_corner_count(self) -> None:
        board = Board(STANDARD)
        self.assertEqual(len(board.hexes), 19)
        self.assertEqual(len(board.mutable_hexes), 19)
        self.assertEqual(len(board.corners), 54)

    def test_neighbor_relation_is_symmetric(self) -> None:
        for spec in BOARD_SPECS.values():
            board = Board(spec)
            for hex_ in board.hexes:
                self.assertLessEqual(len(hex_.neighbors), 6)
                self.assertNotIn(hex_, hex_.neighbors)
                for neighbor in hex_.neighbors:
                    self.assertIn(hex_, neighbor.neighbors, msg=f"{spec.label} {hex_.coordinate}")

    def test_hex_and_corner_relations_agree(self) -> None:
        board = Board(STANDARD)
        for hex_ in board.hexes:
            self.assertEqual(len(hex_.corners), 6)
            for corner in hex_.corners:
                self.assertIn(hex_, corner.hexes)
        for corner in board.corners:
            self.assertGreaterEqual(len(corner.hexes), 1)
            self.assertLessEqual(len(corner.hexes), 3)

    def test_neighbors_share_two_corners(self) -> None:
        board = Board(STANDARD)
        for hex_ in board.hexes:
            for neighbor in hex_.neighbors:
                shared = set(map(id, hex_.corners)) & set(map(id, neighbor.corners))
                self.assertEqual(len(shared), 2)

    def test_center_hex_is_not_coastal(self) -> None:
        board = Board(STANDARD)
        center = board.get_hex(4, 2)
        assert center is not None
        self.assertFalse(center.is_coastal)
        self.assertEqual(len(center.neighbors), 6)
        self.assertEqual(sum(1 for hex_ in board.hexes if not hex_.is_coastal), 7)

    def test_coastal_corners_are_the_perimeter_edge_corners(self) -> None:
        for spec in BOARD_SPECS.values():
            board = Board(spec)
            on_perimeter = {coordinate for edge in board.perimeter_edges() for coordinate in edge}
            coastal = {corner.coordinate for corner in board.coastal_corners()}
            self.assertEqual(coastal, on_perimeter, msg=spec.label)

    def test_standard_perimeter(self) -> None:
        board = Board(STANDARD)
        self.assertEqual(len(board.perimeter_edges()), 30)
        cycle = board.perimeter_corners()
        self.assertEqual(len(cycle), 30)
        self.assertEqual(cycle[:2], [(2, 0), (3, 0)])
        self.assertEqual(board.perimeter_corners(start=(7, 0))[0], (7, 0))

    def test_perimeter_corners_rejects_unknown_start(self) -> None:
        board = Board(STANDARD)
        with self.assertRaises(BoardSpecError):
            board.perimeter_corners(start=(4, 2))

    def test_ports_attach_to_corners(self) -> None:
        board = Board(STANDARD)
        self.assertEqual(len(board.ports), 9)
        for port in board.ports:
            for x, y in port.corners:
                corner = board.get_corner(x, y)
                assert corner is not None
                self.assertIs(corner.port, port)
                self.assertTrue(corner.is_coastal)

    def test_typed_port_resources_ignore_generic_ports(self) -> None:
        board = Board(STANDARD)
        top_left = board.get_hex(2, 0)
        assert top_left is not None
        self.assertEqual(top_left.typed_port_resources(), set())
        top_middle = board.get_hex(4, 0)
        assert top_middle is not None
        self.assertEqual(top_middle.typed_port_resources(), {ResourceType.SHEEP})


class BeachTests(unittest.TestCase):
    def test_beaches_walk_the_whole_coastline(self) -> None:
        board = Board(STANDARD)
        beaches = board.beaches()
        self.assertEqual(len(beaches), 6)
        self.assertEqual(
            [beach.connections for beach in beaches],
            [(1, 2), (2, 3), (3, 4), (4, 5), (5, 6), (6, 1)],
        )
        covered = {coordinate for beach in beaches for coordinate in beach.corners}
        self.assertEqual(covered, set(board.perimeter_corners()))
        for beach, following in zip(beaches, beaches[1:] + beaches[:1]):
            self.assertEqual(beach.corners[-1], following.corners[0])

    def test_every_port_lies_on_a_beach(self) -> None:
        board = Board(STANDARD)
        ports_on_beaches = [port for beach in board.beaches() for port in beach.ports]
        for port in board.ports:
            self.assertTrue(any(port is other for other in ports_on_beaches))

    def test_no_beaches_without_connections(self) -> None:
        spec = dataclasses.replace(STANDARD, beach_connections=())
        self.assertEqual(Board(spec).beaches(), [])


class BoardStateTests(unittest.TestCase):
    def test_reset_clears_state_and_restores_required_hexes(self) -> None:
        spec = BOARD_SPECS[BoardShape.SEAFARERS1]
        board = Board(spec)
        immutable = [hex_ for hex_ in board.hexes if hex_.immutable]
        self.assertTrue(immutable)
        self.assertTrue(all(hex_.resource is ResourceType.WATER for hex_ in immutable))

        for hex_ in board.hexes:
            hex_.resource = ResourceType.WOOD
            hex_.roll_number = 5
        board.set_port_resources([ResourceType.ANY] * len(board.ports))
        board.reset()

        self.assertTrue(all(hex_.resource is ResourceType.WATER for hex_ in immutable))
        self.assertTrue(all(hex_.resource is None for hex_ in board.mutable_hexes))
        self.assertTrue(all(hex_.roll_number is None for hex_ in board.hexes))
        self.assertTrue(board.has_default_ports())

    def test_snapshot_and_apply_layout(self) -> None:
        board = Board(STANDARD)
        for hex_, resource in zip(board.mutable_hexes, STANDARD.resources()):
            hex_.resource = resource
        ports = list(reversed(board.default_port_resources))
        board.set_port_resources(ports)
        layout = board.snapshot()

        board.reset()
        board.apply_layout(layout)
        self.assertEqual([hex_.resource for hex_ in board.mutable_hexes], STANDARD.resources())
        self.assertEqual([port.resource for port in board.ports], ports)

    def test_set_port_resources_checks_length(self) -> None:
        board = Board(STANDARD)
        with self.assertRaises(ValueError):
            board.set_port_resources([ResourceType.ANY])


class BoardSpecTests(unittest.TestCase):
    def test_every_catalogue_spec_builds(self) -> None:
        expected_mutable = {
            BoardShape.STANDARD: 19,
            BoardShape.EXPANSION6: 30,
            BoardShape.SEAFARERS1: 27,
            BoardShape.SEAFARERS2: 23,
            BoardShape.DRAGONS: 30,
        }
        for shape, spec in BOARD_SPECS.items():
            board = Board(spec)
            self.assertEqual(len(board.mutable_hexes), expected_mutable[shape], msg=spec.label)
            self.assertEqual(len(spec.resources()), len(board.mutable_hexes))

    def test_shape_url_keys_are_unique(self) -> None:
        self.assertEqual(set(SHAPE_URL_KEYS), set(BoardShape))
        self.assertEqual(len(set(SHAPE_URL_KEYS.values())), len(SHAPE_URL_KEYS))

    def test_resource_count_mismatch_raises(self) -> None:
        spec = dataclasses.replace(STANDARD, resource_counts=((ResourceType.BRICK, 3),))
        with self.assertRaises(BoardSpecError):
            Board(spec)

    def test_roll_number_count_mismatch_raises(self) -> None:
        spec = dataclasses.replace(STANDARD, roll_number_values=(2, 3))
        with self.assertRaises(BoardSpecError):
            Board(spec)

    def test_invalid_roll_number_raises(self) -> None:
        numbers = list(STANDARD.roll_number_values)
        numbers[0] = 7
        spec = dataclasses.replace(STANDARD, roll_number_values=tuple(numbers))
        with self.assertRaises(BoardSpecError):
            Board(spec)

    def test_port_off_the_board_raises(self) -> None:
        spec = dataclasses.replace(STANDARD, default_ports=((ResourceType.ANY, ((40, 40), (41, 40))),))
        with self.assertRaises(BoardSpecError):
            Board(spec)

    def test_duplicate_layout_coordinate_raises(self) -> None:
        spec = dataclasses.replace(STANDARD, hex_layout=lambda dimensions: [(0, 0), (0, 0)])
        with self.assertRaises(BoardSpecError):
            Board(spec)

    def test_required_coordinates_are_the_immutable_hexes(self) -> None:
        for spec in BOARD_SPECS.values():
            board = Board(spec)
            immutable = {hex_.coordinate for hex_ in board.hexes if hex_.immutable}
            self.assertEqual(set(spec.required_coordinates()), immutable, msg=spec.label)

    def test_required_hex_listed_twice_raises(self) -> None:
        spec = dataclasses.replace(
            STANDARD,
            required_resources=((ResourceType.WATER, ((4, 0),)), (ResourceType.DESERT, ((4, 0),))),
        )
        with self.assertRaises(BoardSpecError):
            Board(spec)

    def test_get_spec_lookup(self) -> None:
        self.assertIs(get_spec("standard"), STANDARD)
        self.assertIs(get_spec("Standard"), STANDARD)
        self.assertIs(get_spec(BoardShape.STANDARD), STANDARD)
        with self.assertRaises(ValueError):
            get_spec("hexagon")

    def test_create_by_counts(self) -> None:
        self.assertEqual(create_by_counts(("a", 3), ("b", 1)), ["a", "a", "a", "b"])


if __name__ == "__main__":
    unittest.main()
