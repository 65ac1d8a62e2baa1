"""
Graph Arena - Core Library

The graph engine behind a game that teaches directed weighted graphs: random
puzzle generation, optimal routes (including routes through required nodes)
and scoring of player submissions.
"""

from .engine import compute_optimal_path, evaluate_submission, generate_graph
from .exceptions import (
    GraphArenaException,
    GraphGenerationError,
    InvalidPathError,
    InvalidWeightError,
    MalformedGraphError,
    UnreachableGoalError,
)
from .models import Difficulty, Edge, GeneratorConfig, GraphModel, Node, OptimalPath, Position, ScoreResult

__all__ = [
    'generate_graph', 'compute_optimal_path', 'evaluate_submission',
    'GraphModel', 'Node', 'Edge', 'Position', 'GeneratorConfig', 'Difficulty', 'OptimalPath', 'ScoreResult',
    'GraphArenaException', 'MalformedGraphError', 'InvalidWeightError', 'GraphGenerationError',
    'UnreachableGoalError', 'InvalidPathError',
]
