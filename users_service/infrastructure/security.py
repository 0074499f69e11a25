from datetime import datetime, timedelta, timezone
from typing import Callable

from passlib.context import CryptContext
from jose import jwt, JWTError

from ..domain.errors import TokenInvalid

DEFAULT_BCRYPT_ROUNDS = 10


class PasswordHasher:
    """Солёный адаптивный хэш (bcrypt_sha256); соль хранится внутри хэша."""

    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS):
        self.rounds = rounds
        self._ctx = CryptContext(
            schemes=["bcrypt_sha256"],
            deprecated="auto",
            bcrypt_sha256__truncate_error=False,
            bcrypt_sha256__default_rounds=rounds,
        )

    def hash(self, plain: str) -> str: return self._ctx.hash(plain)

    def verify(self, plain: str, hashed: str) -> bool:
        # passlib сравнивает за постоянное время
        try:
            return self._ctx.verify(plain, hashed)
        except ValueError:
            # хэш не распознан: считаем, что пароль не совпал
            return False


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Выпускает и проверяет JWT с claim `sub`.

    Алгоритм фиксирован настройками; поле `alg` из заголовка токена
    не используется для выбора проверки.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl_minutes: int = 60,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.ttl = timedelta(minutes=ttl_minutes)
        self.clock = clock

    def issue(self, subject: str) -> str:
        now = self.clock()
        payload = {"sub": str(subject), "iat": now, "exp": now + self.ttl}
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> dict:
        """Возвращает claims или кидает TokenInvalid (подпись, срок, формат)."""
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require_exp": True, "require_sub": True},
            )
        except JWTError as e:
            raise TokenInvalid() from e
        if not claims.get("sub"):
            raise TokenInvalid()
        return claims
