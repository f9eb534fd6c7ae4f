import uuid
from contextlib import contextmanager

import redis

from restaurant.utils.retry import redis_retry
from restaurant.domain.errors import ConcurrencyConflictError
from restaurant.utils.settings import REDIS_URL, LOCK_TTL_SECONDS
from restaurant.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#redis wykonuje atomowo przez lua, skrypt dziala jako jedna nieprzerywalna operacja
#nie mozna wcisnac sie miedzy GET a DEL, wiec get + porownanie + del wszystko naraz


def order_key(order_id: int) -> str:
    return f"order:{order_id}:lock"


def table_key(table_number: str) -> str:
    return f"table:{table_number}:lock"


class LockService:
    """
    -blokada zamowienia / stolika na czas jednej operacji
    -zwalnianie locka tylko przez wlasciciela (token)
    -atomowosc przy pomocy lua
    """

    def __init__(self, url: str | None = None):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @redis_retry()
    def acquire(self, key: str, token: str, ttl: int) -> bool:
        logger.info(f"Acquire lock {key} for {token}")
        #SET order:1:lock "<token>" NX EX 30
        return bool(
            self.redis.set(
                name=key,
                value=token,
                nx=True, #tylko jesli klucz nie istnieje
                ex=ttl, #wygasa sam gdy proces padnie w trakcie operacji
            )
        )

    @redis_retry()
    def release(self, key: str, token: str) -> bool:
        logger.info(f"Release lock {key} for {token}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)


@contextmanager
def held_locks(lock_service, keys, ttl: int = LOCK_TTL_SECONDS):
    """
    Trzyma locki na wszystkie klucze na czas bloku.
    Klucze sortowane zeby dwa requesty nie zakleszczyly sie na odwrotnej kolejnosci.
    """
    token = uuid.uuid4().hex
    acquired = []
    try:
        for key in sorted(set(keys)):
            if not lock_service.acquire(key, token, ttl):
                logger.warning(f"Lock {key} is held by another operation")
                raise ConcurrencyConflictError(key.rsplit(":", 1)[0])
            acquired.append(key)
        yield token
    finally:
        for key in reversed(acquired):
            lock_service.release(key, token)
