from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from pidsync.adapters.datacite import DataCiteAPIError
from pidsync.adapters.datacite.schema import DataCiteState
from pidsync.domain.model import Pid
from pidsync.domain.ports import RegistrarError
from tests.helpers.datacite import METADATA, doi_payload

if TYPE_CHECKING:
    from collections.abc import Callable

    from pidsync.adapters.datacite import DataCiteClient
    from tests.helpers.datacite import Handler

PID = Pid.parse("10.5072/abc123")


def test_fetch_doi_returns_attributes(make_client: Callable[[Handler], DataCiteClient]) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=doi_payload("10.5072/abc123"))

    attributes = make_client(handler).fetch_doi(PID)

    assert attributes is not None
    assert attributes.state is DataCiteState.FINDABLE
    assert attributes.metadata_document() == METADATA
    assert seen[0].url.path == "/dois/10.5072/abc123"
    assert seen[0].headers["Accept"] == "application/vnd.api+json"
    assert seen[0].headers["Authorization"].startswith("Basic ")


def test_fetch_doi_returns_none_for_missing_doi(
    make_client: Callable[[Handler], DataCiteClient],
) -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"errors": [{"status": "404", "title": "Not found"}]})

    assert make_client(handler).fetch_doi(PID) is None


def test_server_errors_raise_registrar_error(
    make_client: Callable[[Handler], DataCiteClient],
) -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"errors": [{"title": "Service unavailable"}]})

    with pytest.raises(DataCiteAPIError) as excinfo:
        make_client(handler).fetch_doi(PID)

    assert isinstance(excinfo.value, RegistrarError)
    assert "503" in str(excinfo.value)
    assert "Service unavailable" in str(excinfo.value)


def test_timeouts_raise_registrar_error(
    make_client: Callable[[Handler], DataCiteClient],
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(DataCiteAPIError, match="timed out"):
        make_client(handler).fetch_doi(PID)


def test_malformed_payload_raises_registrar_error(
    make_client: Callable[[Handler], DataCiteClient],
) -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": {"id": "10.5072/abc123"}})

    with pytest.raises(DataCiteAPIError, match="Unexpected DataCite payload"):
        make_client(handler).fetch_doi(PID)


def test_non_json_body_raises_registrar_error(
    make_client: Callable[[Handler], DataCiteClient],
) -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>maintenance</html>")

    with pytest.raises(DataCiteAPIError, match="non-JSON"):
        make_client(handler).fetch_doi(PID)


@pytest.mark.parametrize(
    ("raw", "expected_path"),
    [
        ("10.5072/a?b", b"/dois/10.5072/a%3Fb"),
        ("https://doi.org/10.5072/a%23b", b"/dois/10.5072/a%23b"),
    ],
)
def test_reserved_suffix_characters_stay_in_the_path(
    make_client: Callable[[Handler], DataCiteClient],
    raw: str,
    expected_path: bytes,
) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(404)

    assert make_client(handler).fetch_doi(Pid.parse(raw)) is None
    assert seen[0].url.raw_path == expected_path
    assert seen[0].url.query == b""
