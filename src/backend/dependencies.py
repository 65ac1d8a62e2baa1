from fastapi import Request

from graph_arena.config import EngineSettings


def get_engine_settings(request: Request) -> EngineSettings:
    """Dependency provider to get the shared EngineSettings instance."""
    return request.app.state.engine_settings
