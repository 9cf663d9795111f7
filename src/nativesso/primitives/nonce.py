"""Nonce generation for binding an SSO request to its redirect."""

from __future__ import annotations

import base64
import logging
import secrets
from typing import Protocol

from nativesso.models.config import DEFAULT_NONCE_BYTES, MIN_NONCE_BYTES

logger = logging.getLogger(__name__)


class SecureRandomSource(Protocol):
    """Source of cryptographically secure random bytes.

    Implementations raise on failure rather than returning short output.
    """

    def fill(self, size: int) -> bytes:
        """Return exactly ``size`` random bytes."""
        ...


class SystemRandomSource:
    """Random source backed by the operating system CSPRNG."""

    def fill(self, size: int) -> bytes:
        return secrets.token_bytes(size)


def generate_nonce(
    source: SecureRandomSource | None = None, size: int = DEFAULT_NONCE_BYTES
) -> str | None:
    """Generate a base64-encoded nonce from ``size`` random bytes.

    The source is asked exactly once. If it fails, or returns the wrong
    number of bytes, the failure is logged and ``None`` is returned so the
    caller can decide whether to continue without a nonce.

    Args:
        source: Random source to draw from, defaults to the system CSPRNG
        size: Number of random bytes, at least 32

    Returns:
        Standard base64 (padded) nonce, or None if generation failed

    Raises:
        ValueError: If size is below the 32 byte minimum
    """
    if size < MIN_NONCE_BYTES:
        raise ValueError(f"Nonce must use at least {MIN_NONCE_BYTES} bytes")

    source = source or SystemRandomSource()
    try:
        data = source.fill(size)
    except Exception as e:
        logger.warning(f"Secure random source failed, no nonce generated: {e}")
        return None

    if len(data) != size:
        logger.warning(
            f"Secure random source returned {len(data)} bytes, expected {size}"
        )
        return None

    return base64.b64encode(data).decode("ascii")
