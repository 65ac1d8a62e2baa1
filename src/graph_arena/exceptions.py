"""
Custom exceptions for the graph engine.

Every error carries a human-readable message plus the ids involved, so callers
can tell the player exactly which node or edge caused the problem.
"""

from typing import Any, Dict


class GraphArenaException(Exception):
    """Base exception for the engine."""
    def __init__(self, message: str, **context: Any):
        self.message = message
        self.context: Dict[str, Any] = context
        super().__init__(self.message)


class MalformedGraphError(GraphArenaException):
    """Raised when a graph breaks a structural invariant (bad ids, weights, self-loops)."""
    pass


class InvalidWeightError(GraphArenaException):
    """Raised when a negative weight reaches the shortest path solver."""
    pass


class GraphGenerationError(GraphArenaException):
    """Raised when the generator cannot satisfy its constraints within the retry budget."""
    pass


class UnreachableGoalError(GraphArenaException):
    """Raised when no finite-weight route from start to goal exists."""
    pass


class InvalidPathError(GraphArenaException):
    """Raised when a submitted path is not a legal walk in the graph."""
    def __init__(self, message: str, from_node_id: str = None, to_node_id: str = None, **context: Any):
        self.from_node_id = from_node_id
        self.to_node_id = to_node_id
        if from_node_id is not None or to_node_id is not None:
            context.setdefault("pair", [from_node_id, to_node_id])
        super().__init__(message, **context)
