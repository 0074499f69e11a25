from dataclasses import dataclass

@dataclass
class RegisterUserInput:
    username: str | None
    email: str | None
    password: str | None

@dataclass
class LoginUserInput:
    email: str | None
    password: str | None
