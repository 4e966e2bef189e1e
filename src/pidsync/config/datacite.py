"""DataCite registrar configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_DATACITE_API_URL = "https://api.datacite.org"
DATACITE_TIMEOUT_SECONDS = 15.0


@dataclass(frozen=True, slots=True)
class DataCiteConfig:
    """Credentials and transport settings for the DataCite REST API."""

    username: str
    password: str
    resilience: ResilienceConfig


def get_datacite_config(*, resilience: ResilienceConfig | None = None) -> DataCiteConfig:
    values = require_env_vars(("DATACITE_USERNAME", "DATACITE_PASSWORD"))
    base_url = optional_env_var("DATACITE_API_URL") or DEFAULT_DATACITE_API_URL
    return DataCiteConfig(
        username=values["DATACITE_USERNAME"],
        password=values["DATACITE_PASSWORD"],
        resilience=resilience
        or ResilienceConfig(
            name="datacite",
            base_url=base_url.rstrip("/"),
            timeout_seconds=DATACITE_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            retry=RetryPolicy(total=3),
            default_headers={"Accept": "application/vnd.api+json"},
        ),
    )
