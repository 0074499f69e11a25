from fastapi import APIRouter, Depends, status

from ....application.dto import LoginUserInput, RegisterUserInput
from ....application.use_cases.get_user import GetUser
from ....application.use_cases.login_user import LoginUser
from ....application.use_cases.register_user import RegisterUser
from ....infrastructure.metrics import user_logins_total, user_registrations_total
from ..authz import get_user_id
from ..dependencies import get_get_user, get_login_user, get_register_user
from ..schemas import ErrorResp, LoginReq, MessageResp, RegisterReq, TokenResp, UserResp

router = APIRouter(prefix="/api/users", tags=["users"])

ERRORS = {
    400: {"model": ErrorResp},
    500: {"model": ErrorResp},
}

@router.post(
    "/register",
    response_model=MessageResp,
    status_code=status.HTTP_201_CREATED,
    responses=ERRORS,
)
def register(payload: RegisterReq, uc: RegisterUser = Depends(get_register_user)):
    uc.execute(RegisterUserInput(
        username=payload.username,
        email=payload.email,
        password=payload.password,
    ))
    user_registrations_total.inc()
    return MessageResp(message="User registered successfully")

@router.post(
    "/login",
    response_model=TokenResp,
    responses={**ERRORS, 401: {"model": ErrorResp}, 404: {"model": ErrorResp}},
)
def login(payload: LoginReq, uc: LoginUser = Depends(get_login_user)):
    token = uc.execute(LoginUserInput(email=payload.email, password=payload.password))
    user_logins_total.inc()
    return TokenResp(token=token)

@router.get(
    "/me",
    response_model=UserResp,
    responses={**ERRORS, 401: {"model": ErrorResp}, 404: {"model": ErrorResp}},
)
def me(user_id: str = Depends(get_user_id), uc: GetUser = Depends(get_get_user)):
    user = uc.execute(user_id)
    return UserResp(
        id=user.id,
        username=user.username,
        email=user.email,
        role=user.role.value,
        created_at=user.created_at,
    )
