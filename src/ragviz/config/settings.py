import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# This file: src/ragviz/config/settings.py
SERVER_ROOT = Path(__file__).resolve().parent.parent.parent.parent
ENV_PATH = SERVER_ROOT / ".env"

if ENV_PATH.exists():
    load_dotenv(ENV_PATH)
else:
    load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return int(value)


class Settings(BaseModel):
    """Global Application Settings"""

    # Environment
    ENV: str = Field(default="development", description="Environment: development, production, testing")
    LOG_LEVEL: str = Field(default="INFO", description="Log level")

    ROOT_DIR: Path = Field(default=SERVER_ROOT, description="Project root directory")

    # Pacing (visualization only)
    STEP_DELAY: float = Field(default=0.3, ge=0, description="Pause between auto-mode steps (seconds)")
    STAGE_DELAY: float = Field(default=0.4, ge=0, description="Pacing delay inside no-op stages (seconds)")

    # Chunking
    CHUNK_SIZE: int = Field(default=200, gt=0, description="Characters per chunk window")
    CHUNK_OVERLAP: int = Field(default=40, ge=0, description="Characters shared by consecutive windows")
    MIN_STRIDE: int = Field(default=20, gt=0, description="Lower bound on the window stride")
    MIN_CHUNK_LENGTH: int = Field(default=5, ge=0, description="Trimmed chunks must be longer than this")
    MAX_CHUNKS: int = Field(default=50, ge=0, description="Upper bound on chunks per document")

    # Retrieval
    RETRIEVAL_TOP_K: int = Field(default=4, ge=1, description="Chunks handed to generation")
    RETRIEVAL_SEED: Optional[int] = Field(default=None, description="Seed for score jitter (unset = random)")
    PAUSE_ON_MISSING_QUERY: bool = Field(default=True, description="Pause auto runs at STORING without a query")

    # Generation backend
    GENERATOR_TYPE: str = Field(default="mock", description="Generator provider: mock, openai")
    LLM_BASE_URL: str = Field(default="https://api.openai.com/v1", description="OpenAI-compatible base URL")
    LLM_API_KEY: Optional[str] = Field(default=None, description="API key for the generation backend")
    LLM_MODEL: str = Field(default="gpt-4o-mini", description="Model used for answers and mock rows")
    LLM_SQL_MODEL: Optional[str] = Field(default=None, description="Model used for text-to-SQL (defaults to LLM_MODEL)")
    LLM_TIMEOUT: float = Field(default=60.0, gt=0, description="Request timeout (seconds)")

    model_config = {
        "frozen": True,
        "arbitrary_types_allowed": True
    }


def load_settings() -> Settings:
    """Load settings from environment variables."""
    return Settings(
        ENV=os.getenv("ENV", "development"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        ROOT_DIR=SERVER_ROOT,
        STEP_DELAY=float(os.getenv("STEP_DELAY", "0.3")),
        STAGE_DELAY=float(os.getenv("STAGE_DELAY", "0.4")),
        CHUNK_SIZE=int(os.getenv("CHUNK_SIZE", "200")),
        CHUNK_OVERLAP=int(os.getenv("CHUNK_OVERLAP", "40")),
        MIN_STRIDE=int(os.getenv("MIN_STRIDE", "20")),
        MIN_CHUNK_LENGTH=int(os.getenv("MIN_CHUNK_LENGTH", "5")),
        MAX_CHUNKS=int(os.getenv("MAX_CHUNKS", "50")),
        RETRIEVAL_TOP_K=int(os.getenv("RETRIEVAL_TOP_K", "4")),
        RETRIEVAL_SEED=_env_optional_int("RETRIEVAL_SEED"),
        PAUSE_ON_MISSING_QUERY=_env_bool("PAUSE_ON_MISSING_QUERY", True),
        GENERATOR_TYPE=os.getenv("GENERATOR_TYPE", "mock"),
        LLM_BASE_URL=os.getenv("LLM_BASE_URL", "https://api.openai.com/v1"),
        LLM_API_KEY=os.getenv("LLM_API_KEY"),
        LLM_MODEL=os.getenv("LLM_MODEL", "gpt-4o-mini"),
        LLM_SQL_MODEL=os.getenv("LLM_SQL_MODEL"),
        LLM_TIMEOUT=float(os.getenv("LLM_TIMEOUT", "60")),
    )

# Global settings instance
settings = load_settings()
