import os
import sys

CURRENT_DIR = os.path.dirname(__file__)
SERVICE_ROOT = os.path.dirname(CURRENT_DIR)
if SERVICE_ROOT not in sys.path:
    sys.path.insert(0, SERVICE_ROOT)

# Настройки читаются при импорте, поэтому окружение задаём до импорта приложения
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from users_service.infrastructure.db import get_db
from users_service.infrastructure.models import Base, UserORM
from users_service.infrastructure.security import PasswordHasher
from users_service.interfaces.http.dependencies import get_password_hasher
from users_service.main import app

# Минимальная стоимость bcrypt, чтобы тесты шли быстро
TEST_ROUNDS = 4


@pytest.fixture
def engine():
    """Тестовая БД в памяти, общая для всех сессий теста"""
    test_engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=TEST_ROUNDS)


@pytest.fixture
def client(session_factory, hasher):
    """Фикстура для тестового клиента"""
    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_password_hasher] = lambda: hasher
    yield TestClient(app, raise_server_exceptions=False)
    # Очищаем после теста
    app.dependency_overrides.clear()


@pytest.fixture
def user_payload():
    """Фабрика тела запроса регистрации с переопределяемыми полями"""
    def _make(**overrides):
        data = {
            "username": "testuser",
            "email": "test@example.com",
            "password": "password123",
        }
        data.update(overrides)
        return data
    return _make


@pytest.fixture
def fetch_users(session_factory):
    """Читает записи пользователей отдельной сессией, в виде словарей"""
    def _fetch(**filters):
        with session_factory() as db:
            query = db.query(UserORM)
            for field, value in filters.items():
                query = query.filter(getattr(UserORM, field) == value)
            return [
                {
                    "id": row.id,
                    "username": row.username,
                    "email": row.email,
                    "password_hash": row.password_hash,
                    "role": row.role,
                    "created_at": row.created_at,
                }
                for row in query.order_by(UserORM.id).all()
            ]
    return _fetch
