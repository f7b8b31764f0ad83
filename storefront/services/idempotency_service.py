import redis
from storefront.domain.errors import AlreadyProcessing
from storefront.utils.retry import redis_retry
from storefront.utils.settings import (
    REDIS_URL,
    IDEMPOTENCY_TTL_SECONDS,
    IDEMPOTENCY_INFLIGHT_TTL_SECONDS,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

INFLIGHT = "INFLIGHT"

#LUA compare and delete, atomic
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#only the in-flight marker is ever deleted, a resolved order id stays until its TTL


class IdempotencyGuard:
    """
    Per (scope, token) state in redis, scope is customer + session:
    -absent -> INFLIGHT (begin, SET NX EX)
    -INFLIGHT -> order id (resolve)
    -INFLIGHT -> absent (release after a failure)
    """

    def __init__(
        self,
        url: str | None = None,
        client: redis.Redis | None = None,
        ttl: int = IDEMPOTENCY_TTL_SECONDS,
        inflight_ttl: int = IDEMPOTENCY_INFLIGHT_TTL_SECONDS,
    ):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl
        self.inflight_ttl = inflight_ttl

    @staticmethod
    def key(scope: str, token: str) -> str:
        return f"idempotency:{scope}:{token}"

    @redis_retry()
    def begin(self, scope: str, token: str) -> int | None:
        """
        None = caller owns the token now and must resolve or release it.
        int = the order this token already produced.
        """
        key = self.key(scope, token)

        for _ in range(2):
            if self.redis.set(name=key, value=INFLIGHT, nx=True, ex=self.inflight_ttl):
                logger.info(f"Idempotency key {key} in flight")
                return None

            value = self.redis.get(key)
            if value is None:
                # expired between SET and GET
                continue
            if value == INFLIGHT:
                raise AlreadyProcessing(token)
            return int(value)

        raise AlreadyProcessing(token)

    @redis_retry()
    def resolve(self, scope: str, token: str, order_id: int):
        key = self.key(scope, token)
        logger.info(f"Idempotency key {key} resolved to order {order_id}")
        self.redis.set(name=key, value=str(order_id), ex=self.ttl)

    @redis_retry()
    def release(self, scope: str, token: str) -> bool:
        key = self.key(scope, token)
        logger.info(f"Release idempotency key {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, INFLIGHT)
        return bool(res)
