# restaurant/api/deps.py
from fastapi import HTTPException

from restaurant.domain.errors import OrderEngineError
from restaurant.services.lock_service import LockService

_lock_service: LockService | None = None


def get_lock_service() -> LockService:
    # jeden klient redis na proces
    global _lock_service
    if _lock_service is None:
        _lock_service = LockService()
    return _lock_service


def http_error(e: OrderEngineError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.to_dict())
