from sqlalchemy.orm import Session
from storefront.data.models.user import UserModel
from storefront.domain.errors import UserNotFound
from storefront.domain.schemas import UserCreate, UserRead
from storefront.repos.user_repo import UserRepo
from storefront.utils.retry import storage_retry


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepo(db)

    @storage_retry()
    def create_user(self, payload: UserCreate) -> UserRead:
        existing = self.repo.get_user_by_email(str(payload.email))
        if existing:
            return UserRead.model_validate(existing)

        user = UserModel(name=payload.name, email=str(payload.email))
        created = self.repo.create_user(user)
        return UserRead.model_validate(created)

    @storage_retry()
    def get_user(self, user_id: int) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise UserNotFound(f"Uzytkownik {user_id} nie istnieje")
        return UserRead.model_validate(user)
