from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from pidsync.adapters.datacite import DataCiteClient
from pidsync.adapters.http_resilience import ResilientClient
from pidsync.config import DataCiteConfig, ResilienceConfig, RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Callable

    from tests.helpers.datacite import Handler

BASE_URL = "https://api.test.datacite.org"


@pytest.fixture
def datacite_config() -> DataCiteConfig:
    return DataCiteConfig(
        username="GBIF.TEST",
        password="secret",
        resilience=ResilienceConfig(
            name="datacite-test",
            base_url=BASE_URL,
            timeout_seconds=1.0,
            retry=RetryPolicy(total=0),
            default_headers={"Accept": "application/vnd.api+json"},
        ),
    )


@pytest.fixture
def make_client(datacite_config: DataCiteConfig) -> Callable[[Handler], DataCiteClient]:
    def factory(handler: Handler) -> DataCiteClient:
        transport = httpx.MockTransport(handler)

        def client_factory(config: ResilienceConfig) -> ResilientClient:
            return ResilientClient(config, transport=transport)

        return DataCiteClient(config=datacite_config, client_factory=client_factory)

    return factory
