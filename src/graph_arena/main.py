import json
import logging
from pathlib import Path
from typing import List, Optional

import typer

from graph_arena.config import settings
from graph_arena.engine import compute_optimal_path, evaluate_submission, generate_graph
from graph_arena.exceptions import GraphArenaException
from graph_arena.logging_config import setup_logging
from graph_arena.models import Difficulty, GeneratorConfig, GraphModel

app = typer.Typer(help="Generate, solve and score weighted graph puzzles.")
logger = logging.getLogger(__name__)


@app.callback()
def configure(
    log_level: str = typer.Option(settings.log_level, "--log-level", "-l", help="Log level."),
):
    setup_logging(level=log_level)


def _load_graph(graph_file: Path) -> GraphModel:
    return GraphModel.load(json.loads(graph_file.read_text(encoding="utf-8")))


def _fail(error: GraphArenaException) -> None:
    logger.error(f"{type(error).__name__}: {error.message}")
    raise typer.Exit(code=1)


@app.command()
def generate(
    seed: int = typer.Option(..., "--seed", help="Seed; the same seed and options give the same graph."),
    difficulty: Optional[Difficulty] = typer.Option(None, "--difficulty", "-d", help="Use a preset profile."),
    nodes: int = typer.Option(8, "--nodes", "-n", help="Number of nodes."),
    density: float = typer.Option(0.3, "--density", help="Fraction of ordered node pairs with an edge."),
    min_weight: int = typer.Option(1, "--min-weight", help="Smallest edge weight."),
    max_weight: int = typer.Option(9, "--max-weight", help="Largest edge weight."),
    required: int = typer.Option(0, "--required", "-r", help="Number of required nodes."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the graph JSON here instead of stdout."),
):
    """
    Generate a random puzzle graph and print it as JSON.
    """
    if difficulty is not None:
        config = GeneratorConfig.for_difficulty(difficulty, seed=seed)
    else:
        config = GeneratorConfig(
            node_count=nodes,
            edge_density=density,
            weight_range=(min_weight, max_weight),
            required_node_count=required,
            seed=seed,
        )

    try:
        graph = generate_graph(config)
    except GraphArenaException as e:
        _fail(e)

    if output:
        output.write_text(graph.to_json(), encoding="utf-8")
        logger.info(f"Graph written to {output}")
    else:
        typer.echo(graph.to_json())


@app.command()
def solve(graph_file: Path = typer.Argument(..., exists=True, help="Graph JSON file.")):
    """
    Print the optimal route for a graph.
    """
    try:
        optimum = compute_optimal_path(_load_graph(graph_file))
    except GraphArenaException as e:
        _fail(e)
    typer.echo(optimum.model_dump_json(indent=2))


@app.command()
def evaluate(
    graph_file: Path = typer.Argument(..., exists=True, help="Graph JSON file."),
    path: List[str] = typer.Argument(..., help="Node ids of the submitted route, starting at the start node."),
):
    """
    Validate and score a submitted route.
    """
    try:
        result = evaluate_submission(_load_graph(graph_file), path)
    except GraphArenaException as e:
        _fail(e)
    typer.echo(result.model_dump_json(indent=2))


if __name__ == "__main__":
    app()
