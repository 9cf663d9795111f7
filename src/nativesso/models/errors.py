"""Exception hierarchy for native SSO redirect handling.

The redirect validator itself reports failures as booleans. These exceptions
are raised by the flow layer so callers can tell a cancelled login apart from
a forged or stale redirect.
"""

from __future__ import annotations


class SSOError(Exception):
    """Base exception for all SSO related errors."""

    pass


class ConfigurationError(SSOError):
    """Raised when the SSO configuration is unusable."""

    pass


class NonceGenerationError(SSOError):
    """Raised when a nonce is required but the random source failed."""

    pass


class SSOFlowError(SSOError):
    """Raised when the SSO flow is driven out of order."""

    pass


class UserAuthCancelledError(SSOFlowError):
    """Raised when the user cancels login in the native app."""

    pass


class RedirectError(SSOError):
    """Raised when an inbound redirect URL cannot be used."""

    pass


class UnrecognizedRedirectError(RedirectError):
    """Raised when a URL is neither a success nor a cancel redirect.

    This usually means the URL belongs to another handler in the host app,
    or that the native app sent an incomplete payload.
    """

    pass


class VerificationError(RedirectError):
    """Raised when a success redirect fails an authenticity check."""

    pass


class NonceMismatchError(VerificationError):
    """Raised when the redirect identifier does not match the sent nonce.

    Indicates a stale redirect from an earlier attempt or a forged one.
    """

    pass


class TokenVerificationError(VerificationError):
    """Raised when the session store rejects the redirect's OAuth token."""

    pass
