"""
LLM Configuration Module.

Transport settings for provider clients. The core itself applies no
deadlines; these values only configure the HTTP client a provider builds.
"""

from dataclasses import dataclass, field

import httpx


@dataclass
class TimeoutConfig:
    """
    Configuration for request timeouts.

    All timeout values are in seconds.

    Attributes:
        connect: Timeout for establishing connection
        read: Timeout for reading response
        write: Timeout for sending the request body
        pool: Timeout for acquiring a pooled connection

    Example:
        config = TimeoutConfig(connect=10.0, read=60.0)
    """

    connect: float = 10.0
    read: float = 60.0
    write: float = 30.0
    pool: float = 10.0

    def __post_init__(self):
        """Validate timeout values."""
        for name in ("connect", "read", "write", "pool"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} timeout must be positive")

    @classmethod
    def fast(cls) -> "TimeoutConfig":
        """Preset for judge prompts and short completions."""
        return cls(connect=5.0, read=30.0, write=10.0, pool=5.0)

    @classmethod
    def standard(cls) -> "TimeoutConfig":
        return cls()

    @classmethod
    def long_running(cls) -> "TimeoutConfig":
        """Preset for long generations and large embedding batches."""
        return cls(connect=15.0, read=300.0, write=60.0, pool=15.0)

    def to_httpx(self) -> httpx.Timeout:
        return httpx.Timeout(connect=self.connect, read=self.read, write=self.write, pool=self.pool)


@dataclass
class LLMConfig:
    """
    Client configuration for remote providers.

    Attributes:
        timeout: Timeout configuration
        max_retries: Retries performed by the provider SDK on connection
            errors; 0 leaves all retry decisions to the caller
        temperature: Sampling temperature sent with every request
        max_tokens: Output token cap sent with every request (None = provider default)
    """

    timeout: TimeoutConfig = field(default_factory=TimeoutConfig.standard)
    max_retries: int = 0
    temperature: float = 0.0
    max_tokens: int | None = None

    def __post_init__(self):
        """Validate configuration."""
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if not 0.0 <= self.temperature <= 2.0:
            raise ValueError("temperature must be between 0 and 2")
        if self.max_tokens is not None and self.max_tokens <= 0:
            raise ValueError("max_tokens must be positive or None")

    @classmethod
    def default(cls) -> "LLMConfig":
        return cls()

    @classmethod
    def judge(cls) -> "LLMConfig":
        """Deterministic, short-answer configuration for evaluators and rerankers."""
        return cls(timeout=TimeoutConfig.fast(), temperature=0.0, max_tokens=512)

    @classmethod
    def resilient(cls) -> "LLMConfig":
        """Longer timeouts with SDK-level connection retries."""
        return cls(timeout=TimeoutConfig.long_running(), max_retries=2)


DEFAULT_TIMEOUT = TimeoutConfig.standard()
DEFAULT_LLM_CONFIG = LLMConfig.default()
