import dataclasses
import unittest

from catan_generator.domain.board import Board, ResourceType
from catan_generator.domain.specs import BOARD_SPECS, STANDARD, BoardShape
from catan_generator.generation import BalancedGenerator, GenerationOptions, RandomGenerator
from catan_generator.serialization import (
    DecodeError,
    UnsupportedFormatError,
    deserialize,
    has_custom_ports,
    serialize,
)
from catan_generator.serialization.board_url import hex_resource_serializer, roll_number_serializer

FAST = GenerationOptions(min_attempts=1, min_time_ms=0.0, cold_start_min_time_ms=0.0)


def board_state(board: Board):
    return (
        [(hex_.coordinate, hex_.resource, hex_.roll_number) for hex_ in board.hexes],
        [port.resource for port in board.ports],
    )


class BoardUrlTests(unittest.TestCase):
    def test_token_starts_with_version_and_shape_key(self) -> None:
        board = BalancedGenerator(FAST, seed=3).generate(STANDARD).board
        token = serialize(board)
        self.assertTrue(token.startswith("0s"))
        self.assertEqual(token.count("-"), 1)
        self.assertFalse(has_custom_ports(token))

    def test_round_trip_with_default_ports(self) -> None:
        board = BalancedGenerator(FAST, seed=4).generate(STANDARD).board
        restored = deserialize(serialize(board))
        self.assertIs(restored.spec, STANDARD)
        self.assertEqual(board_state(restored), board_state(board))

    def test_round_trip_every_shape(self) -> None:
        for shape, spec in BOARD_SPECS.items():
            board = RandomGenerator(FAST, seed=5).generate(spec).board
            token = serialize(board)
            restored = deserialize(token)
            self.assertEqual(restored.shape, shape)
            self.assertEqual(board_state(restored), board_state(board), msg=spec.label)

    def test_custom_ports_are_written_and_restored(self) -> None:
        board = Board(STANDARD)
        for hex_, resource in zip(board.mutable_hexes, STANDARD.resources()):
            hex_.resource = resource
        numbers = iter(STANDARD.roll_numbers())
        for hex_ in board.mutable_hexes:
            if hex_.is_productive:
                hex_.roll_number = next(numbers)
        ports = sorted(board.default_port_resources, key=lambda resource: resource.value)
        board.set_port_resources(ports)
        self.assertFalse(board.has_default_ports())

        token = serialize(board)
        self.assertTrue(has_custom_ports(token))
        self.assertEqual(token.count("-"), 2)
        restored = deserialize(token)
        self.assertEqual([port.resource for port in restored.ports], ports)

    def test_tokens_are_url_safe(self) -> None:
        board = RandomGenerator(dataclasses.replace(FAST, shuffle_ports=True), seed=9).generate(
            BOARD_SPECS[BoardShape.EXPANSION6]
        ).board
        token = serialize(board)
        self.assertTrue(all(char.isalnum() or char == "-" for char in token))

    def test_unsupported_version(self) -> None:
        with self.assertRaises(UnsupportedFormatError):
            deserialize("1s18-18")

    def test_unsupported_shape(self) -> None:
        with self.assertRaises(UnsupportedFormatError):
            deserialize("0x18-18")

    def test_malformed_token(self) -> None:
        for token in ("", "0", "0s18", "0s1-2-3-4"):
            with self.assertRaises(UnsupportedFormatError, msg=token):
                deserialize(token)

    def test_block_that_does_not_fit_the_shape(self) -> None:
        with self.assertRaises(DecodeError):
            deserialize("0s18-18")

    def test_roll_number_on_a_desert_is_rejected(self) -> None:
        board = BalancedGenerator(FAST, seed=6).generate(STANDARD).board
        hexes = list(board.mutable_hexes)
        desert = next(i for i, hex_ in enumerate(hexes) if hex_.resource is ResourceType.DESERT)
        productive = next(i for i, hex_ in enumerate(hexes) if hex_.is_productive)
        numbers = [hex_.roll_number for hex_ in hexes]
        numbers[desert], numbers[productive] = numbers[productive], numbers[desert]
        token = (
            "0s"
            + hex_resource_serializer.serialize([hex_.resource for hex_ in hexes])
            + "-"
            + roll_number_serializer.serialize(numbers)
        )
        with self.assertRaises(DecodeError):
            deserialize(token)

        hexes[desert].roll_number, hexes[productive].roll_number = numbers[desert], numbers[productive]
        with self.assertRaises(ValueError):
            serialize(board)

    def test_serialize_requires_a_filled_board(self) -> None:
        with self.assertRaises(ValueError):
            serialize(Board(STANDARD))


if __name__ == "__main__":
    unittest.main()
