import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


class ProviderSettings(BaseModel):
    """Provider credentials and default model names.

    Nothing in the core reads the environment on import; providers call
    ``load_settings()`` only when credentials were not passed explicitly.
    """

    # Model API access
    OPENAI_API_KEY: Optional[str] = Field(default=None, description="OpenAI-compatible API key")
    OPENAI_URL: Optional[str] = Field(default=None, description="OpenAI-compatible base URL")
    OPENAI_MODEL: str = Field(default="gpt-4o-mini", description="Default chat model")
    OPENAI_EMBEDDING_MODEL: str = Field(default="text-embedding-3-small", description="Default embedding model")

    model_config = {
        "frozen": True,
    }


def load_settings(env_file: str | Path | None = None) -> ProviderSettings:
    """Load settings from environment variables, after reading a .env file.

    Args:
        env_file: Explicit .env path; when omitted python-dotenv searches
            from the current working directory upwards. Variables already
            present in the environment win over the file.
    """
    if env_file is not None:
        load_dotenv(env_file)
    else:
        load_dotenv()

    return ProviderSettings(
        OPENAI_API_KEY=os.getenv("OPENAI_API_KEY"),
        OPENAI_URL=os.getenv("OPENAI_URL") or None,
        OPENAI_MODEL=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        OPENAI_EMBEDDING_MODEL=os.getenv("OPENAI_EMBEDDING_MODEL", "text-embedding-3-small"),
    )
