"""Native app SSO flow orchestration.

Drives one login attempt at a time: creates a redirect validator, hands out
the authorization URL, and turns the inbound redirect into credentials or a
specific error.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from nativesso.models.config import AuthConfig, SSOSettings
from nativesso.models.errors import (
    NonceMismatchError,
    SSOFlowError,
    TokenVerificationError,
    UnrecognizedRedirectError,
    UserAuthCancelledError,
)
from nativesso.models.redirect import RedirectOutcome, RedirectURL, SSOCredentials
from nativesso.primitives.nonce import SecureRandomSource
from nativesso.services.host import HostAppConfig, SessionStore
from nativesso.services.validator import RedirectValidator

logger = logging.getLogger(__name__)


class MobileSSOFlow:
    """Orchestrates login through the native authorization app.

    Handles:
    - Creating a fresh validator (and nonce) per attempt
    - Resolving the redirect scheme against the host app's registration
    - Classifying the inbound redirect as success or cancel
    - Rejecting redirects whose identifier doesn't match the sent nonce
    """

    def __init__(
        self,
        config: AuthConfig,
        session_store: SessionStore,
        host_config: HostAppConfig | None = None,
        settings: SSOSettings | None = None,
        random_source: SecureRandomSource | None = None,
    ):
        self.config = config
        self.settings = settings or SSOSettings()
        self._session_store = session_store
        self._host_config = host_config
        self._random_source = random_source
        self._validator: RedirectValidator | None = None
        self._completed = False

    @property
    def validator(self) -> RedirectValidator | None:
        """Validator for the active attempt, None when idle."""
        return self._validator

    @property
    def redirect_scheme(self) -> str:
        """Scheme the native app will redirect to for the active attempt.

        Raises:
            SSOFlowError: If no attempt has been started
        """
        validator = self._require_validator()
        if self._host_config is None:
            return validator.redirect_scheme
        return validator.resolve_redirect_scheme(self._host_config)

    def start(self) -> str:
        """Start a new login attempt and return its authorization URL.

        Any previous attempt is abandoned; its redirect will no longer be
        accepted.
        """
        if self._validator is not None and not self._completed:
            logger.info("Abandoning previous SSO attempt")

        self._validator = RedirectValidator(
            self.config, settings=self.settings, random_source=self._random_source
        )
        self._completed = False
        logger.info(
            f"Started SSO attempt for consumer {self.config.consumer_key}"
            f" via {self.settings.authorize_endpoint}"
        )
        return self._validator.authorization_url

    def can_handle(self, url: str) -> bool:
        """Check whether the URL is addressed to the active attempt."""
        if self._validator is None or self._completed:
            return False
        return self._validator.is_redirect_url(url)

    def handle_redirect(self, url: str, verify_token: bool = False) -> SSOCredentials:
        """Process the redirect sent back by the native app.

        Args:
            url: Redirect URL received by the host application
            verify_token: Also require the session store to accept the
                redirect's ``oauth_token``

        Returns:
            SSOCredentials: Credentials from a verified success redirect

        Raises:
            SSOFlowError: If no attempt has been started, or the attempt
                already received its redirect
            UserAuthCancelledError: If the user cancelled in the native app
            UnrecognizedRedirectError: If the URL is not a redirect for
                this attempt or misses required parameters
            NonceMismatchError: If the identifier doesn't match the nonce
            TokenVerificationError: If ``verify_token`` is set and the session
                store rejects the OAuth token
        """
        validator = self._require_validator()
        if self._completed:
            raise SSOFlowError("SSO attempt already completed, call start() again")

        redirect = RedirectURL.parse(url)

        outcome = validator.classify(redirect)
        logger.debug(
            f"Redirect with scheme {redirect.scheme} classified as {outcome.value}"
        )

        if outcome is RedirectOutcome.CANCEL:
            self._completed = True
            raise UserAuthCancelledError("User cancelled login in the native app")

        if outcome is RedirectOutcome.UNRECOGNIZED:
            raise UnrecognizedRedirectError(
                f"URL with scheme {redirect.scheme} is not an SSO redirect"
                f" for {validator.redirect_scheme}"
            )

        if not validator.verify_nonce(redirect):
            logger.warning("SSO redirect identifier does not match the sent nonce")
            raise NonceMismatchError(
                "Redirect identifier mismatch - stale or forged SSO redirect"
            )

        if verify_token and not validator.verify_oauth_token(
            redirect, self._session_store
        ):
            logger.warning("SSO redirect OAuth token rejected by the session store")
            raise TokenVerificationError("Redirect OAuth token is not a pending token")

        try:
            credentials = SSOCredentials.from_redirect(redirect)
        except ValidationError as e:
            raise UnrecognizedRedirectError(
                f"Invalid SSO redirect parameters: {e}"
            ) from e

        self._completed = True
        logger.info("SSO login succeeded")
        return credentials

    def verify_session_token(self, url: str) -> bool:
        """Check the redirect's OAuth token with the session store.

        Raises:
            SSOFlowError: If no attempt has been started
        """
        return self._require_validator().verify_oauth_token(
            url, self._session_store
        )

    def _require_validator(self) -> RedirectValidator:
        if self._validator is None:
            raise SSOFlowError("No SSO attempt in progress, call start() first")
        return self._validator
