from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    STUDENT = "student"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"


@dataclass(frozen=True)
class User:
    id: int | None
    username: str
    email: str
    role: Role = Role.STUDENT
    created_at: datetime | None = None


@dataclass(frozen=True)
class UserCredentials:
    """Пользователь вместе с хэшем пароля; наружу не отдаётся."""
    user: User
    password_hash: str
