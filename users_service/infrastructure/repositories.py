from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .models import UserORM
from ..domain.entities import Role, User, UserCredentials
from ..domain.errors import DuplicateFailure
from ..application.use_cases.register_user import IUserRepository

# Код нарушения уникальности в PostgreSQL
PG_UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    if getattr(orig, "pgcode", None) == PG_UNIQUE_VIOLATION:
        return True
    text = str(orig).lower()
    return "unique" in text or "duplicate" in text


def to_domain(u: UserORM) -> User:
    return User(id=u.id, username=u.username, email=u.email, role=Role(u.role), created_at=u.created_at)

class UserRepository(IUserRepository):
    def __init__(self, db: Session): self.db = db

    def find_by_email_or_username(self, email: str, username: str) -> User | None:
        row = (
            self.db.query(UserORM)
            .filter(or_(UserORM.email == email, UserORM.username == username))
            .first()
        )
        return to_domain(row) if row else None

    def get_credentials_by_email(self, email: str) -> UserCredentials | None:
        row = self.db.query(UserORM).filter(UserORM.email == email).first()
        if not row:
            return None
        return UserCredentials(user=to_domain(row), password_hash=row.password_hash)

    def get_by_id(self, user_id: int) -> User | None:
        row = self.db.get(UserORM, user_id)
        return to_domain(row) if row else None

    def create(self, username: str, email: str, password_hash: str, role: Role = Role.STUDENT) -> User:
        row = UserORM(username=username, email=email, password_hash=password_hash, role=Role(role).value)
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError as e:
            # Индекс уникальности - единственный атомарный арбитр при гонке
            self.db.rollback()
            if is_unique_violation(e):
                raise DuplicateFailure() from e
            raise
        self.db.refresh(row)
        return to_domain(row)
