from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from restaurant.api.deps import http_error
from restaurant.data.database import get_db
from restaurant.domain.errors import OrderEngineError
from restaurant.services.user_service import UserService
from restaurant.domain.schemas import UserCreate, UserRead

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/", response_model=UserRead, status_code=201)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    service = UserService(db)
    return service.create_user(payload)


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: int, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        return service.get_user(user_id)
    except OrderEngineError as e:
        raise http_error(e)
