import structlog

from ...domain.errors import CredentialMismatch, NotFoundFailure, ValidationFailure
from ..dto import LoginUserInput
from .register_user import IPasswordHasher, IUserRepository, normalize_email


class ITokenIssuer:
    def issue(self, subject: str) -> str: ...


class LoginUser:
    def __init__(self, repo: IUserRepository, hasher: IPasswordHasher, tokens: ITokenIssuer, logger=None):
        self.repo = repo
        self.hasher = hasher
        self.tokens = tokens
        self.logger = logger or structlog.get_logger(__name__)

    def execute(self, data: LoginUserInput) -> str:
        if not data.email or not data.password:
            raise ValidationFailure("Email and password are required")
        email = normalize_email(data.email)
        creds = self.repo.get_credentials_by_email(email)
        if creds is None:
            self.logger.info("user_login_failed", reason="not_found")
            raise NotFoundFailure()
        if not self.hasher.verify(data.password, creds.password_hash):
            self.logger.info("user_login_failed", reason="invalid_credentials", user_id=creds.user.id)
            raise CredentialMismatch()
        token = self.tokens.issue(str(creds.user.id))
        self.logger.info("user_login_succeeded", user_id=creds.user.id)
        return token
