from __future__ import annotations

import logging
import sys
from typing import Dict, List, Optional, Sequence

import click
from rich.console import Console
from rich.table import Table
from rich.text import Text

from catan_generator.domain.board import RED_NUMBERS, Board, ResourceType
from catan_generator.domain.specs import BOARD_SPECS, SHAPE_URL_KEYS, BoardShape, get_spec
from catan_generator.generation import (
    DesertPlacement,
    GenerationOptions,
    GeneratorStrategy,
    calibrate_score_range,
    create_generator,
    evaluate_board,
)
from catan_generator.serialization import deserialize, has_custom_ports, serialize

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

SHAPE_NAMES = [shape.name.lower() for shape in BoardShape]

RESOURCE_STYLES: Dict[ResourceType, str] = {
    ResourceType.BRICK: "bold red3",
    ResourceType.DESERT: "khaki1",
    ResourceType.GOLD: "bold gold1",
    ResourceType.ORE: "bold grey62",
    ResourceType.SHEEP: "bold chartreuse3",
    ResourceType.WATER: "blue",
    ResourceType.WHEAT: "bold yellow",
    ResourceType.WOOD: "bold dark_green",
}
RESOURCE_LABELS: Dict[ResourceType, str] = {
    ResourceType.ANY: "3:1",
    ResourceType.BRICK: "Br",
    ResourceType.DESERT: "De",
    ResourceType.GOLD: "Go",
    ResourceType.ORE: "Or",
    ResourceType.SHEEP: "Sh",
    ResourceType.WATER: "~~",
    ResourceType.WHEAT: "Wh",
    ResourceType.WOOD: "Wo",
}
CELL_WIDTH = 3

console = Console()


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


def render_board(board: Board) -> Text:
    """Draws the hex grid as text, one token row per hex row."""
    width = max(hex_.x for hex_ in board.hexes) + 2
    text = Text()
    for y in range(board.dimensions.height):
        line = Text(" " * (width * CELL_WIDTH))
        for hex_ in board.hexes:
            if hex_.y != y:
                continue
            label = RESOURCE_LABELS.get(hex_.resource, "??") if hex_.resource else ".."
            number = f"{hex_.roll_number:>2}" if hex_.roll_number is not None else "  "
            cell = Text(f"{label}{number}", style=RESOURCE_STYLES.get(hex_.resource, ""))
            if hex_.roll_number in RED_NUMBERS:
                cell.stylize("reverse", len(label))
            start = hex_.x * CELL_WIDTH
            line = line[:start] + cell + line[start + len(cell) :]
        line.rstrip()
        text.append_text(line)
        text.append("\n")
    return text


def _ports_table(board: Board) -> Table:
    table = Table(title="Ports")
    table.add_column("#", justify="right")
    table.add_column("Resource")
    table.add_column("Corners")
    for index, port in enumerate(board.ports, start=1):
        table.add_row(str(index), RESOURCE_LABELS[port.resource], f"{port.corners[0]} {port.corners[1]}")
    return table


def _scores_table(board: Board) -> Table:
    table = Table(title="Hex scores")
    table.add_column("Hex")
    table.add_column("Resource")
    table.add_column("Roll", justify="right")
    table.add_column("Score", justify="right")
    for hex_ in board.hexes:
        if not hex_.is_productive:
            continue
        table.add_row(
            str(hex_.coordinate),
            hex_.resource.value if hex_.resource else "-",
            str(hex_.roll_number or "-"),
            f"{hex_.score or 0.0:.2f}",
        )
    return table


def _print_board(board: Board, token: str, *, score: float, show_scores: bool, show_ports: bool) -> None:
    console.print(f"[bold]{board.spec.label}[/bold]")
    console.print(render_board(board))
    if show_ports:
        console.print(_ports_table(board))
    if show_scores:
        console.print(_scores_table(board))
    console.print(f"Score: [cyan]{score:.2f}[/cyan]")
    console.print(f"Token: [bold green]{token}[/bold green]")


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log generation details (DEBUG).")
def cli(verbose: bool) -> None:
    """Balanced board generator for Catan-style hex boards."""
    configure_logging(verbose)


@cli.command()
@click.option(
    "--shape",
    default="standard",
    show_default=True,
    type=click.Choice(SHAPE_NAMES, case_sensitive=False),
    help="Board shape to generate.",
)
@click.option(
    "--strategy",
    default=GeneratorStrategy.BALANCED.value,
    show_default=True,
    type=click.Choice([strategy.value for strategy in GeneratorStrategy], case_sensitive=False),
)
@click.option(
    "--desert-placement",
    default=DesertPlacement.RANDOM.value,
    show_default=True,
    type=click.Choice([placement.value for placement in DesertPlacement], case_sensitive=False),
)
@click.option(
    "--resource-distribution",
    default=1.0,
    show_default=True,
    type=click.FloatRange(0.0, 1.0),
    help="1.0 spreads equal resources apart, 0.0 clumps them together.",
)
@click.option(
    "--number-distribution",
    default=0.85,
    show_default=True,
    type=click.FloatRange(0.0, 1.0),
    help="1.0 balances roll numbers across corners, 0.0 stacks them.",
)
@click.option("--shuffle-ports/--no-shuffle-ports", default=False, show_default=True)
@click.option("--allow-resource-on-port/--no-resource-on-port", default=True, show_default=True)
@click.option("--separate-red-numbers/--allow-adjacent-red-numbers", default=True, show_default=True)
@click.option("--min-attempts", default=15, show_default=True, type=click.IntRange(1, None))
@click.option("--min-time-ms", default=200.0, show_default=True, type=click.FloatRange(0.0, None))
@click.option("--max-attempts", default=10_000, show_default=True, type=click.IntRange(1, None))
@click.option("--seed", default=None, type=int, help="Seed for a reproducible board.")
@click.option("--show-scores", is_flag=True, default=False, help="Print per-hex scores.")
def generate(
    shape: str,
    strategy: str,
    desert_placement: str,
    resource_distribution: float,
    number_distribution: float,
    shuffle_ports: bool,
    allow_resource_on_port: bool,
    separate_red_numbers: bool,
    min_attempts: int,
    min_time_ms: float,
    max_attempts: int,
    seed: Optional[int],
    show_scores: bool,
) -> None:
    """Generate a board and print it with its share token."""
    try:
        options = GenerationOptions(
            desert_placement=DesertPlacement(desert_placement.lower()),
            resource_distribution=resource_distribution,
            number_distribution=number_distribution,
            shuffle_ports=shuffle_ports,
            allow_resource_on_port=allow_resource_on_port,
            separate_red_numbers=separate_red_numbers,
            min_attempts=min_attempts,
            min_time_ms=min_time_ms,
            # A one-off command always runs cold; use the same floor.
            cold_start_min_time_ms=min_time_ms,
            max_attempts=max_attempts,
        )
        generator = create_generator(strategy.lower(), options, seed=seed)
        result = generator.generate(get_spec(shape))
    except (ValueError, RuntimeError) as exc:
        raise click.ClickException(str(exc)) from exc

    _print_board(
        result.board,
        serialize(result.board),
        score=result.score,
        show_scores=show_scores,
        show_ports=not result.board.has_default_ports(),
    )
    console.print(
        f"[dim]{result.candidates} candidate(s), {result.failures} discarded, "
        f"{result.elapsed_ms:.0f} ms[/dim]"
    )


@cli.command()
@click.argument("token")
@click.option("--show-scores", is_flag=True, default=False, help="Print per-hex scores.")
def show(token: str, show_scores: bool) -> None:
    """Rebuild and print the board behind TOKEN."""
    try:
        board = deserialize(token)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    score = evaluate_board(board)
    _print_board(board, token, score=score, show_scores=show_scores, show_ports=has_custom_ports(token))


@cli.command()
@click.option(
    "--shape",
    "shapes",
    multiple=True,
    type=click.Choice(SHAPE_NAMES, case_sensitive=False),
    help="Shape(s) to calibrate. Default: all.",
)
@click.option("--samples", default=20, show_default=True, type=click.IntRange(1, None))
@click.option("--min-time-ms", default=200.0, show_default=True, type=click.FloatRange(0.0, None))
@click.option("--seed", default=None, type=int)
def calibrate(shapes: Sequence[str], samples: int, min_time_ms: float, seed: Optional[int]) -> None:
    """Measure greedy and fair score means per shape."""
    options = GenerationOptions(min_time_ms=min_time_ms, cold_start_min_time_ms=min_time_ms)
    selected: List[BoardShape] = [BoardShape[name.upper()] for name in shapes] or list(BoardShape)

    table = Table(title=f"Score ranges ({samples} samples)")
    table.add_column("Shape", no_wrap=True)
    table.add_column("Greedy", justify="right")
    table.add_column("Fair", justify="right")
    table.add_column("Current", justify="right")
    for shape in selected:
        spec = BOARD_SPECS[shape]
        try:
            measured = calibrate_score_range(spec, samples, options, seed=seed)
        except (ValueError, RuntimeError) as exc:
            raise click.ClickException(str(exc)) from exc
        current = spec.score_range
        table.add_row(
            spec.label,
            f"{measured.greedy:.1f}",
            f"{measured.fair:.1f}",
            f"{current.greedy:.1f} / {current.fair:.1f}" if current else "-",
        )
    console.print(table)


@cli.command()
def shapes() -> None:
    """List the available board shapes."""
    table = Table(title="Board shapes")
    table.add_column("Name", no_wrap=True)
    table.add_column("Label")
    table.add_column("Token key", justify="center")
    table.add_column("Hexes", justify="right")
    table.add_column("Roll numbers", justify="right")
    table.add_column("Ports", justify="right")
    for shape, spec in BOARD_SPECS.items():
        table.add_row(
            shape.name.lower(),
            spec.label,
            SHAPE_URL_KEYS[shape],
            str(len(spec.resources())),
            str(len(spec.roll_numbers())),
            str(len(spec.default_ports)),
        )
    console.print(table)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
