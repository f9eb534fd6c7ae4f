from sqlalchemy.orm import Session

from restaurant.data.models.user import UserModel
from restaurant.domain.errors import NotFoundError
from restaurant.repos.user_repo import UserRepo
from restaurant.domain.schemas import UserCreate, UserRead


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def create_user(self, payload: UserCreate) -> UserRead:
        existing = self.repo.get_by_email(payload.email)
        if existing:
            return UserRead.model_validate(existing)

        user = UserModel(email=payload.email, name=payload.name, role=payload.role)
        created = self.repo.create_user(user)
        return UserRead.model_validate(created)

    def get_user(self, user_id: int) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return UserRead.model_validate(user)
