import re
import unittest

from click.testing import CliRunner

from catan_generator.cli import cli
from catan_generator.domain.specs import STANDARD
from catan_generator.generation import BalancedGenerator, GenerationOptions
from catan_generator.serialization import serialize

FAST_ARGS = ["--min-attempts", "1", "--min-time-ms", "0"]


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self.runner = CliRunner()

    def test_generate_prints_a_token(self) -> None:
        result = self.runner.invoke(cli, ["generate", "--seed", "5", *FAST_ARGS])
        self.assertEqual(result.exit_code, 0, msg=result.output)
        self.assertIn("Standard", result.output)
        self.assertRegex(result.output, r"Token: 0s[0-9a-zA-Z]+-[0-9a-zA-Z]+")

    def test_generate_is_reproducible_with_a_seed(self) -> None:
        args = ["generate", "--shape", "expansion6", "--seed", "17", *FAST_ARGS]
        first = self.runner.invoke(cli, args)
        second = self.runner.invoke(cli, args)
        token = re.compile(r"Token: (\S+)")
        self.assertEqual(token.search(first.output).group(1), token.search(second.output).group(1))

    def test_generate_random_strategy_with_scores(self) -> None:
        result = self.runner.invoke(
            cli, ["generate", "--strategy", "random", "--shape", "dragons", "--seed", "2", "--show-scores", *FAST_ARGS]
        )
        self.assertEqual(result.exit_code, 0, msg=result.output)
        self.assertIn("Hex scores", result.output)
        self.assertIn("The Desert Dragons", result.output)

    def test_show_round_trips_a_token(self) -> None:
        options = GenerationOptions(min_attempts=1, min_time_ms=0.0, cold_start_min_time_ms=0.0)
        token = serialize(BalancedGenerator(options, seed=3).generate(STANDARD).board)
        result = self.runner.invoke(cli, ["show", token])
        self.assertEqual(result.exit_code, 0, msg=result.output)
        self.assertIn(f"Token: {token}", result.output)

    def test_show_rejects_unknown_tokens(self) -> None:
        result = self.runner.invoke(cli, ["show", "9zzz-1"])
        self.assertNotEqual(result.exit_code, 0)
        self.assertIn("Unsupported", result.output)

    def test_infeasible_options_become_a_click_error(self) -> None:
        result = self.runner.invoke(cli, ["generate", "--min-attempts", "5", "--max-attempts", "2"])
        self.assertNotEqual(result.exit_code, 0)
        self.assertIn("max_attempts", result.output)

    def test_shapes_lists_every_shape(self) -> None:
        result = self.runner.invoke(cli, ["shapes"])
        self.assertEqual(result.exit_code, 0, msg=result.output)
        for name in ("standard", "expansion6", "seafarers1", "seafarers2", "dragons"):
            self.assertIn(name, result.output)

    def test_calibrate_single_shape(self) -> None:
        result = self.runner.invoke(
            cli, ["calibrate", "--shape", "standard", "--samples", "1", "--min-time-ms", "0", "--seed", "1"]
        )
        self.assertEqual(result.exit_code, 0, msg=result.output)
        self.assertIn("Score ranges", result.output)


if __name__ == "__main__":
    unittest.main()
