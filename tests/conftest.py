import pytest


class FixedRandomSource:
    """Random source returning a repeated byte pattern."""

    def __init__(self, pattern: bytes = b"\x01"):
        self.pattern = pattern
        self.calls: list[int] = []

    def fill(self, size: int) -> bytes:
        self.calls.append(size)
        return (self.pattern * size)[:size]


class FailingRandomSource:
    """Random source that always fails, like an exhausted entropy pool."""

    def __init__(self):
        self.calls = 0

    def fill(self, size: int) -> bytes:
        self.calls += 1
        raise OSError("secure random source unavailable")


class FakeSessionStore:
    """Session store that accepts a fixed set of tokens and records lookups."""

    def __init__(self, valid_tokens: set[str] | None = None):
        self.valid_tokens = valid_tokens or set()
        self.lookups: list[str | None] = []

    def is_valid_oauth_token(self, token: str | None) -> bool:
        self.lookups.append(token)
        return token in self.valid_tokens


@pytest.fixture
def fixed_source() -> FixedRandomSource:
    return FixedRandomSource()


@pytest.fixture
def failing_source() -> FailingRandomSource:
    return FailingRandomSource()


@pytest.fixture
def session_store() -> FakeSessionStore:
    return FakeSessionStore({"request-token-123"})
