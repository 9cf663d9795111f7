"""Collaborators supplied by the host application.

The validator never reaches into global state. Session lookups and URL
scheme registration are passed in through these protocols.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol


class SessionStore(Protocol):
    """Session store that knows which OAuth request tokens are outstanding."""

    def is_valid_oauth_token(self, token: str | None) -> bool:
        """Return True if the token belongs to a pending login."""
        ...


class HostAppConfig(Protocol):
    """Host application URL scheme registration."""

    def registered_url_schemes(self) -> Iterable[str]:
        """Return every custom URL scheme the host app is registered for."""
        ...


class StaticHostAppConfig:
    """Host config with a fixed set of registered schemes.

    Suitable for tests and for hosts that already know their schemes at
    startup.
    """

    def __init__(self, schemes: Iterable[str] = ()):
        self._schemes = tuple(schemes)

    def registered_url_schemes(self) -> Iterable[str]:
        return self._schemes
