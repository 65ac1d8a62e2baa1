import logging
import uvicorn
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.config import BackendConfig, config
from backend.api.graphs import router as graphs_router
from backend.exceptions import graph_arena_exception_handler
from graph_arena.exceptions import GraphArenaException
from graph_arena.logging_config import setup_logging, setup_prod_logging


def configure_logging(backend_config: BackendConfig) -> None:
    """Rich console logs while debugging, plain parseable lines otherwise."""
    if backend_config.debug:
        setup_logging(level=backend_config.engine.log_level)
    else:
        setup_prod_logging(level=backend_config.engine.log_level)


# Configure unified logging to match graph_arena style
configure_logging(config)

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logger.info("Starting Graph Arena API...")
    logger.info(f"All-pairs threshold: {config.engine.all_pairs_threshold} nodes")

    yield

    logger.info("Graph Arena API shutdown complete")

# Create FastAPI app
app = FastAPI(
    title="Graph Arena API",
    description="Generate weighted graph puzzles, compute optimal routes and score player submissions",
    version="0.1.0",
    debug=config.debug,
    lifespan=lifespan
)
app.state.engine_settings = config.engine

# Routers and Middleware
app.include_router(graphs_router)
app.add_exception_handler(GraphArenaException, graph_arena_exception_handler)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "message": "Graph Arena API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
        "graph_api": "/api/graphs"
    }

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "graph-arena-api",
        "version": "0.1.0",
    }

if __name__ == "__main__":
    uvicorn.run(
        "backend.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="info"
    )
