"""
HTTP mapping for engine exceptions.
"""

import logging
from typing import Dict, Type

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from graph_arena.exceptions import (
    GraphArenaException,
    GraphGenerationError,
    InvalidPathError,
    InvalidWeightError,
    MalformedGraphError,
    UnreachableGoalError,
)

logger = logging.getLogger(__name__)

STATUS_CODES: Dict[Type[GraphArenaException], int] = {
    MalformedGraphError: 422,
    InvalidWeightError: 422,
    GraphGenerationError: 422,
    InvalidPathError: 400,  # shown to the player as an illegal move
    UnreachableGoalError: 409,
}


def status_code_for(exc: GraphArenaException) -> int:
    for exc_type in type(exc).__mro__:
        if exc_type in STATUS_CODES:
            return STATUS_CODES[exc_type]
    return 500


async def graph_arena_exception_handler(request: Request, exc: GraphArenaException) -> JSONResponse:
    """Turn an engine error into a JSON response that names the offending ids."""
    status_code = status_code_for(exc)
    logger.warning(f"{request.method} {request.url.path} -> {status_code} {type(exc).__name__}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": exc.message,
            "error": type(exc).__name__,
            "context": jsonable_encoder(exc.context),
        }
    )
