import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


class EngineSettings(BaseModel):
    """Tunable settings for the graph engine."""

    # Graphs with at most this many nodes are solved with the all-pairs table
    all_pairs_threshold: int = Field(40, ge=1, description="Largest node count solved with Floyd-Warshall")

    # Bounded resampling budget for required node selection
    max_retries: int = Field(25, ge=1, description="Resampling attempts before generation gives up")

    log_level: str = Field("INFO", description="Log level (DEBUG, INFO, WARNING, ERROR)")

    @classmethod
    def from_env(cls) -> "EngineSettings":
        """Create settings from environment variables."""
        return cls(
            all_pairs_threshold=int(os.getenv("GRAPH_ARENA_ALL_PAIRS_THRESHOLD", "40")),
            max_retries=int(os.getenv("GRAPH_ARENA_MAX_RETRIES", "25")),
            log_level=os.getenv("GRAPH_ARENA_LOG_LEVEL", "INFO"),
        )


# Global settings instance
settings = EngineSettings.from_env()
