"""Redirect URL models for native SSO.

Contains the parsed form of an inbound redirect, the credentials carried by
a successful one, and the validator's outcome and state enums.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from nativesso.primitives.query import (
    is_url_scheme,
    parameters_from_query_string,
)

SUCCESS_PARAMETERS = ("secret", "token", "username", "identifier")


class RedirectOutcome(str, Enum):
    SUCCESS = "success"
    CANCEL = "cancel"
    UNRECOGNIZED = "unrecognized"


class ValidatorState(str, Enum):
    PENDING = "pending"
    RESOLVED = "resolved"


@dataclass(frozen=True)
class RedirectURL:
    """Untrusted redirect URL received by the host application.

    ``payload`` is everything after ``scheme:`` (and an optional ``//``)
    with the fragment removed. It is None when nothing follows, which is
    how the native app signals a cancelled login. ``scheme://?`` still has
    a payload: the host component is present but empty.

    No host/path split is made, because unescaped base64 identifiers may
    contain "/". A path segment is parsed like any other pair, so
    ``scheme://evil/?token=t`` yields a stray ``evil/`` key next to
    ``token``.
    """

    raw: str
    scheme: str | None
    payload: str | None
    parameters: dict[str, str] = field(default_factory=dict, compare=False)

    @classmethod
    def parse(cls, url: str | RedirectURL) -> RedirectURL:
        """Parse a redirect URL. Never raises for string input."""
        if isinstance(url, RedirectURL):
            return url

        candidate, sep, rest = url.partition(":")
        if sep and is_url_scheme(candidate):
            scheme = candidate.lower()
        else:
            scheme = None
            rest = url

        if rest.startswith("//"):
            rest = rest[2:]
        rest = rest.partition("#")[0]
        payload = rest or None

        return cls(
            raw=url,
            scheme=scheme,
            payload=payload,
            parameters=parameters_from_query_string(payload),
        )

    @property
    def has_host(self) -> bool:
        return self.payload is not None

    def get(self, key: str) -> str | None:
        return self.parameters.get(key)

    def has_parameters(self, *keys: str) -> bool:
        return all(key in self.parameters for key in keys)


class SSOCredentials(BaseModel):
    """Credentials returned by the native app on a successful login."""

    model_config = ConfigDict(frozen=True)

    token: str
    secret: str = Field(repr=False)
    username: str
    identifier: str
    user_id: str | None = None

    @classmethod
    def from_redirect(cls, redirect: RedirectURL) -> SSOCredentials:
        """Build credentials from a success redirect's parameters.

        Raises:
            pydantic.ValidationError: If a required parameter is missing
        """
        values = {key: redirect.get(key) for key in SUCCESS_PARAMETERS}
        values["user_id"] = redirect.get("user_id")
        return cls(**values)
