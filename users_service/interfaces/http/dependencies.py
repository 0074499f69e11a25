from functools import lru_cache

import structlog
from fastapi import Depends
from sqlalchemy.orm import Session

from ...config import settings
from ...infrastructure.db import get_db
from ...infrastructure.repositories import UserRepository
from ...infrastructure.security import PasswordHasher, TokenService
from ...application.use_cases.register_user import RegisterUser
from ...application.use_cases.login_user import LoginUser
from ...application.use_cases.get_user import GetUser


def get_logger():
    return structlog.get_logger("users_service")

@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=settings.BCRYPT_ROUNDS)

@lru_cache
def get_token_service() -> TokenService:
    return TokenService(
        secret=settings.SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
        ttl_minutes=settings.TOKEN_TTL_MINUTES,
    )

def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return UserRepository(db)

def get_register_user(
    repo: UserRepository = Depends(get_user_repository),
    hasher: PasswordHasher = Depends(get_password_hasher),
    logger=Depends(get_logger),
) -> RegisterUser:
    return RegisterUser(repo=repo, hasher=hasher, logger=logger)

def get_login_user(
    repo: UserRepository = Depends(get_user_repository),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
    logger=Depends(get_logger),
) -> LoginUser:
    return LoginUser(repo=repo, hasher=hasher, tokens=tokens, logger=logger)

def get_get_user(repo: UserRepository = Depends(get_user_repository)) -> GetUser:
    return GetUser(repo=repo)
