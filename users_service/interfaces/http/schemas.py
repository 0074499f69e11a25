from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

# Поля необязательные: отсутствие проверяется в use case и даёт 400, а не 422
class RegisterReq(BaseModel):
    username: str | None = None
    email: str | None = None
    password: str | None = None

class LoginReq(BaseModel):
    email: str | None = None
    password: str | None = None

class MessageResp(BaseModel):
    message: str

class TokenResp(BaseModel):
    token: str

class UserResp(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    username: str
    email: str
    role: str
    created_at: datetime = Field(alias="createdAt")

class ErrorResp(BaseModel):
    error: str
    code: str
