"""Client configuration read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_PAGE_SIZE = 100
DEFAULT_DELAY_SECONDS = 3.0
DEFAULT_NUM_RETRIES = 3
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_USER_AGENT = "arxiv-feed-client/1.0.0"


@dataclass(frozen=True, slots=True)
class ClientSettings:
    """Recognized client options.

    Attributes:
        page_size:       Results requested per API page (positive).
        delay_seconds:   Minimum spacing between consecutive requests.
        num_retries:     Extra attempts after the first failed page fetch.
        timeout_seconds: Per-request connection/read timeout.
        user_agent:      Value of the identifying ``User-Agent`` header.
    """

    page_size: int = DEFAULT_PAGE_SIZE
    delay_seconds: float = DEFAULT_DELAY_SECONDS
    num_retries: int = DEFAULT_NUM_RETRIES
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        if self.page_size <= 0:
            raise ValueError(f"page_size must be positive, got {self.page_size}")
        if self.delay_seconds < 0:
            raise ValueError(f"delay_seconds must be non-negative, got {self.delay_seconds}")
        if self.num_retries < 0:
            raise ValueError(f"num_retries must be non-negative, got {self.num_retries}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {self.timeout_seconds}")


def load_settings() -> ClientSettings:
    """Build settings from ``ARXIV_*`` environment variables.

    Unset variables fall back to the defaults above. Call ``load_dotenv()``
    first if the values live in a ``.env`` file.
    """
    return ClientSettings(
        page_size=_env_number("ARXIV_PAGE_SIZE", int, DEFAULT_PAGE_SIZE),
        delay_seconds=_env_number("ARXIV_DELAY_SECONDS", float, DEFAULT_DELAY_SECONDS),
        num_retries=_env_number("ARXIV_NUM_RETRIES", int, DEFAULT_NUM_RETRIES),
        timeout_seconds=_env_number("ARXIV_TIMEOUT_SECONDS", float, DEFAULT_TIMEOUT_SECONDS),
        user_agent=os.getenv("ARXIV_USER_AGENT", DEFAULT_USER_AGENT),
    )


def _env_number(name: str, cast: type, default: int | float) -> int | float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc
