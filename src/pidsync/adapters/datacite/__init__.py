"""DataCite registrar adapter."""

from __future__ import annotations

from .client import DataCiteAPIError, DataCiteClient
from .probe import STATUS_BY_STATE, DataCiteRegistrarProbe

__all__ = [
    "STATUS_BY_STATE",
    "DataCiteAPIError",
    "DataCiteClient",
    "DataCiteRegistrarProbe",
]
