# restaurant/utils/retry.py
import logging

import redis
import requests
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from restaurant.utils.logging import get_logger

logger = get_logger(__name__)

RETRY_ATTEMPTS = 3


def _retry_on(exceptions, base_wait: float, max_wait: float):
    # po wyczerpaniu prob leci oryginalny wyjatek, nie RetryError
    return retry(
        reraise=True,
        stop=stop_after_attempt(RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=base_wait, min=base_wait, max=max_wait),
        retry=retry_if_exception_type(exceptions),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )


def http_retry():
    """Katalog zdalny: ponawiamy tylko bledy sieci, 4xx/5xx ida od razu do wolajacego."""
    return _retry_on((requests.ConnectionError, requests.Timeout), base_wait=0.3, max_wait=3)


def redis_retry():
    return _retry_on(redis.RedisError, base_wait=0.2, max_wait=2)
