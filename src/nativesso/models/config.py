"""Configuration models for native SSO.

Contains the application credentials sent to the native authorization app
and the settings that shape the redirect exchange.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from nativesso.primitives.query import is_url_scheme

DEFAULT_SCHEME_PREFIX = "twitterkit"
DEFAULT_AUTHORIZE_ENDPOINT = "twitterauth://authorize"
DEFAULT_FALLBACK_SCHEME = "twittersdk"
DEFAULT_NONCE_BYTES = 48
MIN_NONCE_BYTES = 32


class AuthConfig(BaseModel):
    """Consumer key and secret identifying the calling application."""

    model_config = ConfigDict(frozen=True)

    consumer_key: str
    consumer_secret: str = Field(repr=False)

    @field_validator("consumer_key", "consumer_secret")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v


class SSOSettings(BaseModel):
    """Settings for the SSO redirect exchange.

    Defaults match the native Twitter app contract. Every field can be
    overridden from the environment with ``SSOSettings.from_env()``.
    """

    model_config = ConfigDict(frozen=True)

    scheme_prefix: str = DEFAULT_SCHEME_PREFIX
    authorize_endpoint: str = DEFAULT_AUTHORIZE_ENDPOINT
    fallback_scheme: str = DEFAULT_FALLBACK_SCHEME
    nonce_bytes: int = Field(default=DEFAULT_NONCE_BYTES, ge=MIN_NONCE_BYTES)

    # When set, a failing random source aborts validator construction
    # instead of silently disabling the identifier check.
    require_nonce: bool = False

    @field_validator("scheme_prefix", "fallback_scheme")
    @classmethod
    def validate_scheme_token(cls, v: str) -> str:
        if not is_url_scheme(v):
            raise ValueError(f"Invalid URL scheme component: {v!r}")
        return v

    @field_validator("authorize_endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        if "://" not in v or "?" in v:
            raise ValueError(f"Authorize endpoint must be a URL without query: {v}")
        return v

    def redirect_scheme_for(self, consumer_key: str) -> str:
        """Derive the redirect scheme registered for a consumer key."""
        return f"{self.scheme_prefix}-{consumer_key}"

    @classmethod
    def from_env(cls, prefix: str = "NATIVESSO_") -> SSOSettings:
        """Build settings from environment variables (and a .env file).

        Args:
            prefix: Environment variable prefix, e.g. ``NATIVESSO_NONCE_BYTES``

        Raises:
            pydantic.ValidationError: If a variable holds an invalid value
        """
        load_dotenv()

        values = {}
        for name in cls.model_fields:
            raw = os.getenv(f"{prefix}{name.upper()}")
            if raw is not None:
                values[name] = raw
        return cls(**values)
