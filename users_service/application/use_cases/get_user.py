from ...domain.entities import User
from ...domain.errors import NotFoundFailure, TokenInvalid
from .register_user import IUserRepository


class GetUser:
    def __init__(self, repo: IUserRepository):
        self.repo = repo

    def execute(self, subject: str) -> User:
        try:
            user_id = int(subject)
        except (TypeError, ValueError):
            raise TokenInvalid()
        user = self.repo.get_by_id(user_id)
        if user is None:
            raise NotFoundFailure()
        return user
