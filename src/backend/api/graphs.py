from fastapi import APIRouter, Depends, Query
from typing import Annotated
import logging

from backend.dependencies import get_engine_settings
from backend.models.api_models import ErrorResponse, EvaluateRequest
from graph_arena.config import EngineSettings
from graph_arena.engine import compute_optimal_path, evaluate_submission, generate_graph
from graph_arena.models import Difficulty, GeneratorConfig, GraphModel, OptimalPath, ScoreResult

router = APIRouter(prefix="/api/graphs", tags=["graphs"])
logger = logging.getLogger(__name__)

SettingsDep = Annotated[EngineSettings, Depends(get_engine_settings)]

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
}

# Endpoints are plain `def` so the CPU-bound engine runs in FastAPI's threadpool

@router.post("/generate", response_model=GraphModel, responses=ERROR_RESPONSES)
def generate(config: GeneratorConfig, settings: SettingsDep) -> GraphModel:
    """Generate a random puzzle graph from an explicit configuration."""
    return generate_graph(config, settings=settings)

@router.post("/generate/{difficulty}", response_model=GraphModel, responses=ERROR_RESPONSES)
def generate_for_difficulty(
    difficulty: Difficulty,
    settings: SettingsDep,
    seed: int = Query(..., description="Seed; the same seed gives the same graph"),
) -> GraphModel:
    """Generate a random puzzle graph from a preset difficulty profile."""
    logger.info(f"Generating {difficulty.value} graph with seed {seed}")
    return generate_graph(GeneratorConfig.for_difficulty(difficulty, seed=seed), settings=settings)

@router.post("/optimal", response_model=OptimalPath, responses=ERROR_RESPONSES)
def optimal_path(graph: GraphModel, settings: SettingsDep) -> OptimalPath:
    """Compute the optimal route through the graph, visiting every required node."""
    return compute_optimal_path(graph, settings=settings)

@router.post("/evaluate", response_model=ScoreResult, responses=ERROR_RESPONSES)
def evaluate(request: EvaluateRequest, settings: SettingsDep) -> ScoreResult:
    """Validate a submitted route and score it against the optimum."""
    return evaluate_submission(request.graph, request.path, settings=settings)
