"""Persistent identifier value type.

A PID is held in canonical ``prefix/suffix`` form. Prefixes and suffixes are
case-sensitive, so parsing never changes letter case.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final, Self
from urllib.parse import unquote

RESOLVER_URL: Final[str] = "https://doi.org/"

_PREFIX_PATTERN: Final[str] = r"10\.\d+(?:\.\d+)*"
_PID_RE: Final[re.Pattern[str]] = re.compile(rf"^(?P<prefix>{_PREFIX_PATTERN})/(?P<suffix>\S+)$")
_SCHEME_RE: Final[re.Pattern[str]] = re.compile(r"^doi:\s*", re.IGNORECASE)
_RESOLVER_RE: Final[re.Pattern[str]] = re.compile(
    r"^https?://(?:dx\.)?doi\.org/", re.IGNORECASE
)


class InvalidPidError(ValueError):
    """Raised when a string is not a syntactically valid PID."""


@dataclass(frozen=True, slots=True)
class Pid:
    prefix: str
    suffix: str

    def __post_init__(self) -> None:
        if not re.fullmatch(_PREFIX_PATTERN, self.prefix):
            raise InvalidPidError(f"Invalid PID prefix: {self.prefix!r}")
        if not self.suffix or any(char.isspace() for char in self.suffix):
            raise InvalidPidError(f"Invalid PID suffix: {self.suffix!r}")

    @classmethod
    def parse(cls, raw: str) -> Self:
        """Parse ``raw`` in bare, ``doi:`` or resolver-URL form."""

        value = raw.strip()
        if _RESOLVER_RE.match(value):
            value = unquote(_RESOLVER_RE.sub("", value, count=1))
        else:
            value = _SCHEME_RE.sub("", value, count=1)

        match = _PID_RE.match(value)
        if match is None:
            raise InvalidPidError(f"{raw!r} is not a valid DOI")
        return cls(prefix=match["prefix"], suffix=match["suffix"])

    @classmethod
    def is_parsable(cls, raw: str | None) -> bool:
        if raw is None:
            return False
        try:
            cls.parse(raw)
        except InvalidPidError:
            return False
        return True

    @property
    def name(self) -> str:
        return f"{self.prefix}/{self.suffix}"

    @property
    def url(self) -> str:
        return f"{RESOLVER_URL}{self.name}"

    def is_under(self, prefix: str) -> bool:
        """Whether this PID was minted under ``prefix``."""
        return self.prefix == prefix.strip()

    def __str__(self) -> str:
        return self.name
