import pytest
from pydantic import ValidationError

from nativesso.models.config import AuthConfig, SSOSettings


class TestAuthConfig:
    def test_valid_config(self) -> None:
        config = AuthConfig(consumer_key="abc123", consumer_secret="s3cret")

        assert config.consumer_key == "abc123"
        assert config.consumer_secret == "s3cret"

    @pytest.mark.parametrize(
        "key, secret", [("", "s3cret"), ("abc123", ""), ("   ", "s3cret")]
    )
    def test_rejects_empty_credentials(self, key: str, secret: str) -> None:
        with pytest.raises(ValidationError):
            AuthConfig(consumer_key=key, consumer_secret=secret)

    def test_secret_is_hidden_from_repr(self) -> None:
        config = AuthConfig(consumer_key="abc123", consumer_secret="s3cret")

        assert "abc123" in repr(config)
        assert "s3cret" not in repr(config)

    def test_is_immutable(self) -> None:
        config = AuthConfig(consumer_key="abc123", consumer_secret="s3cret")

        with pytest.raises(ValidationError):
            config.consumer_key = "other"


class TestSSOSettings:
    def test_defaults_match_native_app_contract(self) -> None:
        settings = SSOSettings()

        assert settings.scheme_prefix == "twitterkit"
        assert settings.authorize_endpoint == "twitterauth://authorize"
        assert settings.fallback_scheme == "twittersdk"
        assert settings.nonce_bytes == 48
        assert settings.require_nonce is False

    def test_redirect_scheme_derivation(self) -> None:
        assert SSOSettings().redirect_scheme_for("abc123") == "twitterkit-abc123"
        assert (
            SSOSettings(scheme_prefix="app").redirect_scheme_for("abc123")
            == "app-abc123"
        )

    def test_rejects_nonce_below_32_bytes(self) -> None:
        with pytest.raises(ValidationError):
            SSOSettings(nonce_bytes=16)

    @pytest.mark.parametrize(
        "prefix", ["", "bad prefix", "app/x", "app:", "1app", "\u00e4pp"]
    )
    def test_rejects_invalid_scheme_prefix(self, prefix: str) -> None:
        with pytest.raises(ValidationError):
            SSOSettings(scheme_prefix=prefix)

    @pytest.mark.parametrize(
        "endpoint", ["authorize", "twitterauth://authorize?extra=1"]
    )
    def test_rejects_invalid_endpoint(self, endpoint: str) -> None:
        with pytest.raises(ValidationError):
            SSOSettings(authorize_endpoint=endpoint)


class TestSSOSettingsFromEnv:
    def test_reads_prefixed_environment_variables(self, monkeypatch) -> None:
        # Arrange
        monkeypatch.setenv("NATIVESSO_SCHEME_PREFIX", "app")
        monkeypatch.setenv("NATIVESSO_NONCE_BYTES", "64")
        monkeypatch.setenv("NATIVESSO_REQUIRE_NONCE", "true")

        # Act
        settings = SSOSettings.from_env()

        # Assert
        assert settings.scheme_prefix == "app"
        assert settings.nonce_bytes == 64
        assert settings.require_nonce is True
        assert settings.fallback_scheme == "twittersdk"

    def test_custom_prefix(self, monkeypatch) -> None:
        monkeypatch.setenv("MYAPP_FALLBACK_SCHEME", "myapp-sdk")

        settings = SSOSettings.from_env(prefix="MYAPP_")

        assert settings.fallback_scheme == "myapp-sdk"

    def test_invalid_environment_value_raises(self, monkeypatch) -> None:
        monkeypatch.setenv("NATIVESSO_NONCE_BYTES", "8")

        with pytest.raises(ValidationError):
            SSOSettings.from_env()
