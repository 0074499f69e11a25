import re

import structlog

from ...domain.entities import Role, User, UserCredentials
from ...domain.errors import DuplicateFailure, ValidationFailure
from ..dto import RegisterUserInput

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
PASSWORD_MIN_LENGTH = 6
EMAIL_MAX_LENGTH = 254
# Разделитель внутри группы обязателен, иначе откат экспоненциальный
EMAIL_PATTERN = re.compile(
    r"^\w+(?:[.-]\w+)*@\w+(?:[.-]\w+)*(?:\.\w{2,3})+$", re.IGNORECASE | re.ASCII
)


class IUserRepository:
    def find_by_email_or_username(self, email: str, username: str) -> User | None: ...
    def get_credentials_by_email(self, email: str) -> UserCredentials | None: ...
    def get_by_id(self, user_id: int) -> User | None: ...
    def create(self, username: str, email: str, password_hash: str, role: Role = Role.STUDENT) -> User: ...

class IPasswordHasher:
    def hash(self, plain: str) -> str: ...
    def verify(self, plain: str, hashed: str) -> bool: ...


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_registration(data: RegisterUserInput) -> RegisterUserInput:
    """Проверяет поля регистрации и возвращает нормализованный ввод."""
    username = (data.username or "").strip()
    email = normalize_email(data.email or "")
    password = data.password or ""
    if not username or not email or not password:
        raise ValidationFailure("All fields are required")
    if len(username) < USERNAME_MIN_LENGTH:
        raise ValidationFailure(f"Username must be at least {USERNAME_MIN_LENGTH} characters long")
    if len(username) > USERNAME_MAX_LENGTH:
        raise ValidationFailure(f"Username must be at most {USERNAME_MAX_LENGTH} characters long")
    if len(email) > EMAIL_MAX_LENGTH or not EMAIL_PATTERN.match(email):
        raise ValidationFailure("Invalid email format")
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationFailure(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
    return RegisterUserInput(username=username, email=email, password=password)


class RegisterUser:
    def __init__(self, repo: IUserRepository, hasher: IPasswordHasher, logger=None):
        self.repo = repo
        self.hasher = hasher
        self.logger = logger or structlog.get_logger(__name__)

    def execute(self, data: RegisterUserInput) -> User:
        data = validate_registration(data)
        # Быстрая проверка ради понятного ответа; гарантию даёт уникальный индекс
        if self.repo.find_by_email_or_username(data.email, data.username):
            raise DuplicateFailure()
        pwd_hash = self.hasher.hash(data.password)
        user = self.repo.create(data.username, data.email, pwd_hash, role=Role.STUDENT)
        self.logger.info("user_registered", user_id=user.id, username=user.username)
        return user
