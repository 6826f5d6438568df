"""GitHub API configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var
from .http_resilience import (
    USER_AGENT,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
    http_cache_config,
)

GITHUB_API_URL = "https://api.github.com"
GITHUB_TIMEOUT_SECONDS = 15.0
GITHUB_USER_AGENT = USER_AGENT


@dataclass(frozen=True, slots=True)
class GitHubConfig:
    """Holds the optional GitHub token and client settings."""

    token: str | None
    resilience: ResilienceConfig


def github_headers(token: str | None) -> dict[str, str]:
    headers = {
        "Accept": "application/vnd.github.v3+json",
        "User-Agent": GITHUB_USER_AGENT,
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def get_github_config(*, token: str | None = None) -> GitHubConfig:
    effective_token = token or optional_env_var("VERSIONWATCH_GITHUB_TOKEN", "GITHUB_TOKEN")
    return GitHubConfig(
        token=effective_token,
        resilience=ResilienceConfig(
            name="github",
            base_url=GITHUB_API_URL,
            timeout_seconds=GITHUB_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=0),
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            cache=http_cache_config(),
            default_headers=github_headers(effective_token),
        ),
    )
