"""DataCite REST API (JSON:API) response schemas."""

from __future__ import annotations

import binascii
import logging
from base64 import b64decode
from enum import StrEnum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

log = logging.getLogger(__name__)


class DataCiteBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.debug(
            "DataCite %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class DataCiteState(StrEnum):
    DRAFT = "draft"
    REGISTERED = "registered"
    FINDABLE = "findable"


class DataCiteDoiAttributes(DataCiteBaseModel):
    doi: str
    prefix: str | None = None
    suffix: str | None = None
    state: DataCiteState | None = None
    url: str | None = None
    xml: str | None = None
    updated: str | None = None

    def metadata_document(self) -> str | None:
        """Return the base64-encoded ``xml`` attribute as text."""
        if not self.xml:
            return None
        try:
            return b64decode(self.xml, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise ValueError(f"Undecodable metadata for DOI {self.doi}") from exc


class DataCiteDoiData(DataCiteBaseModel):
    id: str
    type: str = "dois"
    attributes: DataCiteDoiAttributes


class DataCiteDoiResponse(DataCiteBaseModel):
    data: DataCiteDoiData


class DataCiteErrorEntry(DataCiteBaseModel):
    status: str | None = None
    title: str | None = None
    detail: str | None = None


class DataCiteErrorResponse(DataCiteBaseModel):
    errors: list[DataCiteErrorEntry] = Field(default_factory=list["DataCiteErrorEntry"])

    def summary(self) -> str:
        return "; ".join(entry.title or entry.detail or "" for entry in self.errors)
