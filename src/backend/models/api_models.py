from typing import List
from pydantic import BaseModel, Field

from graph_arena.models import GraphModel


class EvaluateRequest(BaseModel):
    """A player's route submitted for scoring. The optimum is always solved on the server."""
    graph: GraphModel = Field(..., description="The puzzle graph the route was played on")
    path: List[str] = Field(..., description="Node ids of the submitted route, starting at the start node")


class ErrorResponse(BaseModel):
    """Body of every engine error response."""
    detail: str = Field(..., description="Human-readable error message")
    error: str = Field(..., description="Error kind, e.g. 'InvalidPathError'")
    context: dict = Field(default_factory=dict, description="Ids involved in the error")
