# storefront/api/deps.py
from functools import lru_cache

from storefront.services.idempotency_service import IdempotencyGuard


@lru_cache
def get_idempotency_guard() -> IdempotencyGuard:
    # one redis connection pool per process
    return IdempotencyGuard()


def session_scope(customer_id: int, session_id: str | None) -> str:
    # without a session header the customer is the scope
    return session_id or f"customer:{customer_id}"
