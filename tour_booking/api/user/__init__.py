import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr

from tour_booking.models.user import User
from tour_booking.services.auth import create_send_token, protect
from tour_booking.utils.errors import AppError


logger = logging.getLogger(__name__)

router = APIRouter()


class SignupBody(BaseModel):
    name: str
    email: EmailStr
    password: str
    password_confirm: str


@router.post("/signup", status_code=201)
def signup(body: SignupBody) -> dict:
    # Only whitelisted fields reach the document; role always starts as the default
    user = User(
        name=body.name,
        email=body.email,
        password=body.password,
        password_confirm=body.password_confirm,
    )
    user.save()
    logger.info("User %s signed up", user.id)
    return create_send_token(user)


class LoginBody(BaseModel):
    email: str | None = None
    password: str | None = None


@router.post("/login")
def login(body: LoginBody) -> dict:
    if not body.email or not body.password:
        raise AppError("Please provide email and password!", 400)

    user: User | None = User.with_password(email=body.email.strip().lower()).first()
    # Same message for unknown email and wrong password
    if not user or not user.correct_password(body.password, user.password):
        logger.info("Failed login attempt")
        raise AppError("Incorrect email or password", 401)
    return create_send_token(user)


@router.get("/me")
def get_me(current_user: User = Depends(protect)) -> dict:
    return {"status": "success", "data": {"user": current_user.to_output()}}


class UpdatePasswordBody(BaseModel):
    password_current: str
    password: str
    password_confirm: str


@router.patch("/update-my-password")
def update_password(body: UpdatePasswordBody, current_user: User = Depends(protect)) -> dict:
    user: User | None = User.with_password(id=current_user.id).first()
    if not user or not user.correct_password(body.password_current, user.password):
        raise AppError("Your current password is wrong.", 401)

    user.password = body.password
    user.password_confirm = body.password_confirm
    user.save()
    return create_send_token(user)
