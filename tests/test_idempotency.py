"""Idempotency guard state machine on top of redis."""
import pytest

from storefront.domain.errors import AlreadyProcessing
from storefront.services.idempotency_service import INFLIGHT


def test_first_attempt_owns_the_token(guard, redis_client):
    assert guard.begin("sess-1", "tok") is None
    assert redis_client.get(guard.key("sess-1", "tok")) == INFLIGHT
    assert redis_client.ttl(guard.key("sess-1", "tok")) > 0


def test_in_flight_token_is_rejected(guard):
    guard.begin("sess-1", "tok")
    with pytest.raises(AlreadyProcessing):
        guard.begin("sess-1", "tok")


def test_resolved_token_returns_order(guard):
    guard.begin("sess-1", "tok")
    guard.resolve("sess-1", "tok", 101)

    assert guard.begin("sess-1", "tok") == 101
    assert guard.begin("sess-1", "tok") == 101


def test_release_allows_retry(guard):
    guard.begin("sess-1", "tok")
    assert guard.release("sess-1", "tok") is True
    assert guard.begin("sess-1", "tok") is None


def test_release_keeps_resolved_token(guard):
    guard.begin("sess-1", "tok")
    guard.resolve("sess-1", "tok", 5)

    assert guard.release("sess-1", "tok") is False
    assert guard.begin("sess-1", "tok") == 5


def test_tokens_are_scoped_per_session(guard):
    guard.begin("sess-1", "tok")
    guard.resolve("sess-1", "tok", 5)

    assert guard.begin("sess-2", "tok") is None
