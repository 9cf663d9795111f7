"""Redirect URL validation for native app single sign-on.

Builds the authorization URL sent to the native app and checks the redirect
that comes back: scheme match, payload shape, nonce match and OAuth token
validity. One validator serves exactly one authorization attempt.
"""

from __future__ import annotations

import logging
import secrets

from nativesso.models.config import (
    DEFAULT_AUTHORIZE_ENDPOINT,
    AuthConfig,
    SSOSettings,
)
from nativesso.models.errors import ConfigurationError, NonceGenerationError
from nativesso.models.redirect import (
    SUCCESS_PARAMETERS,
    RedirectOutcome,
    RedirectURL,
    ValidatorState,
)
from nativesso.primitives.nonce import SecureRandomSource, generate_nonce
from nativesso.primitives.query import (
    is_url_scheme,
    query_string_from_parameters,
)
from nativesso.services.host import HostAppConfig, SessionStore

logger = logging.getLogger(__name__)

OAUTH_TOKEN_PARAMETER = "oauth_token"


class RedirectValidator:
    """Builds and validates the redirect exchange for one SSO attempt.

    Classification and verification return booleans and never raise, so a
    host app can offer every inbound URL to the validator and ignore the
    ones that don't belong to it.

    When the random source fails, the nonce is empty and ``verify_nonce``
    passes for any URL. Set ``SSOSettings.require_nonce`` to make that a
    construction error instead.
    """

    def __init__(
        self,
        config: AuthConfig,
        settings: SSOSettings | None = None,
        random_source: SecureRandomSource | None = None,
    ):
        """Initialize the validator for a new authorization attempt.

        Args:
            config: Consumer credentials of the calling application
            settings: Exchange settings, defaults used when omitted
            random_source: Source for nonce bytes, system CSPRNG by default

        Raises:
            ConfigurationError: If the derived redirect scheme is not a valid
                URL scheme, so no redirect could ever match it
            NonceGenerationError: If nonce generation fails and
                ``settings.require_nonce`` is set
        """
        self._settings = settings or SSOSettings()
        self._redirect_scheme = self._settings.redirect_scheme_for(
            config.consumer_key
        )
        if not is_url_scheme(self._redirect_scheme):
            raise ConfigurationError(
                f"Redirect scheme {self._redirect_scheme!r} is not a valid URL scheme"
            )

        nonce = generate_nonce(random_source, self._settings.nonce_bytes)
        if nonce is None and self._settings.require_nonce:
            raise NonceGenerationError("Unable to generate SSO nonce")
        self._nonce = nonce or ""

        self._authorization_url = self.build_authorization_url(
            config.consumer_key,
            config.consumer_secret,
            self._redirect_scheme,
            self._nonce,
            endpoint=self._settings.authorize_endpoint,
        )
        self._state = ValidatorState.PENDING

        logger.debug(
            f"Created redirect validator for scheme {self._redirect_scheme}"
            f" (nonce {'set' if self._nonce else 'absent'})"
        )

    @classmethod
    def from_credentials(
        cls,
        consumer_key: str,
        consumer_secret: str,
        scheme_prefix: str | None = None,
        random_source: SecureRandomSource | None = None,
    ) -> RedirectValidator:
        """Create a validator from raw consumer credentials."""
        settings = (
            SSOSettings(scheme_prefix=scheme_prefix)
            if scheme_prefix is not None
            else SSOSettings()
        )
        config = AuthConfig(consumer_key=consumer_key, consumer_secret=consumer_secret)
        return cls(config, settings=settings, random_source=random_source)

    @staticmethod
    def build_authorization_url(
        consumer_key: str,
        consumer_secret: str,
        redirect_scheme: str,
        nonce: str | None,
        endpoint: str = DEFAULT_AUTHORIZE_ENDPOINT,
    ) -> str:
        """Build the URL that opens the native authorization app.

        The identifier parameter is only included when a nonce is present.
        """
        params = {
            "consumer_key": consumer_key,
            "consumer_secret": consumer_secret,
            "oauth_callback": redirect_scheme,
        }
        if nonce:
            params["identifier"] = nonce

        return f"{endpoint}?{query_string_from_parameters(params)}"

    @property
    def authorization_url(self) -> str:
        return self._authorization_url

    @property
    def redirect_scheme(self) -> str:
        return self._redirect_scheme

    @property
    def nonce(self) -> str:
        """Nonce sent as ``identifier``, empty if generation failed."""
        return self._nonce

    @property
    def state(self) -> ValidatorState:
        return self._state

    @property
    def settings(self) -> SSOSettings:
        return self._settings

    def is_redirect_url(self, url: str | RedirectURL) -> bool:
        """Check whether the URL uses this attempt's redirect scheme.

        The native app may lowercase the scheme we hand it, so the
        comparison ignores case.
        """
        return self._matches_scheme(RedirectURL.parse(url).scheme)

    def is_success_url(self, url: str | RedirectURL) -> bool:
        """Check whether the URL is a successful login redirect.

        Only the presence of the parameters is checked here. Use
        ``verify_nonce`` and ``verify_oauth_token`` to check their values.
        """
        redirect = RedirectURL.parse(url)
        proper_scheme = self._matches_scheme(redirect.scheme)
        is_success = proper_scheme and redirect.has_parameters(*SUCCESS_PARAMETERS)
        if is_success:
            self._resolve()
        return is_success

    def is_cancel_url(self, url: str | RedirectURL) -> bool:
        """Check whether the URL is a cancelled login redirect (no payload)."""
        redirect = RedirectURL.parse(url)
        is_cancel = self._matches_scheme(redirect.scheme) and not redirect.has_host
        if is_cancel:
            self._resolve()
        return is_cancel

    def classify(self, url: str | RedirectURL) -> RedirectOutcome:
        redirect = RedirectURL.parse(url)
        if self.is_success_url(redirect):
            return RedirectOutcome.SUCCESS
        if self.is_cancel_url(redirect):
            return RedirectOutcome.CANCEL
        return RedirectOutcome.UNRECOGNIZED

    def verify_nonce(self, url: str | RedirectURL) -> bool:
        """Check the redirect's identifier against the nonce we sent.

        Passes for any URL when no nonce was sent.
        """
        if not self._nonce:
            return True

        identifier = RedirectURL.parse(url).get("identifier")
        if identifier is None:
            return False

        return secrets.compare_digest(
            self._nonce.encode("utf-8"), identifier.encode("utf-8")
        )

    def verify_oauth_token(
        self, url: str | RedirectURL, session_store: SessionStore
    ) -> bool:
        """Ask the session store whether the redirect's OAuth token is valid.

        The token may be None when the URL doesn't carry one; the session
        store decides what that means.
        """
        token = RedirectURL.parse(url).get(OAUTH_TOKEN_PARAMETER)
        return bool(session_store.is_valid_oauth_token(token))

    def has_registered_scheme(self, host_config: HostAppConfig) -> bool:
        return any(
            self._matches_scheme(scheme)
            for scheme in host_config.registered_url_schemes()
            if scheme
        )

    def resolve_redirect_scheme(self, host_config: HostAppConfig) -> str:
        """Return the scheme the native app should redirect to.

        Falls back to the shared SDK scheme when the host app has not
        registered this consumer's scheme.
        """
        if self.has_registered_scheme(host_config):
            return self._redirect_scheme

        logger.warning(
            f"URL scheme {self._redirect_scheme} is not registered by the host app,"
            f" falling back to {self._settings.fallback_scheme}"
        )
        return self._settings.fallback_scheme

    def _matches_scheme(self, scheme: str | None) -> bool:
        if scheme is None:
            return False
        return scheme.casefold() == self._redirect_scheme.casefold()

    def _resolve(self) -> None:
        if self._state is ValidatorState.PENDING:
            self._state = ValidatorState.RESOLVED
            logger.debug(f"Redirect for scheme {self._redirect_scheme} resolved")
