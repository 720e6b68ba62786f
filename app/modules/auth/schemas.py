from enum import Enum
from pydantic import BaseModel, EmailStr
from typing import Optional


class AuthMode(str, Enum):
    SIGN_IN = "sign_in"
    SIGN_UP = "sign_up"
    FORGOT_PASSWORD = "forgot_password"
    UPDATE_PASSWORD = "update_password"


class FeedbackKind(str, Enum):
    ERROR = "error"
    SUCCESS = "success"


class Feedback(BaseModel):
    kind: FeedbackKind
    message: str


class AuthUser(BaseModel):
    id: Optional[str] = None
    username: str
    email: Optional[str] = None
    is_admin: bool = False


class LoginRequest(BaseModel):
    email: str
    password: str = ""


class RegisterRequest(BaseModel):
    first_name: str
    last_name: str
    email: str
    password: str
    confirm_password: str


class ForgotPasswordRequest(BaseModel):
    email: str


class UpdatePasswordRequest(BaseModel):
    password: str
    confirm_password: str


class OAuthResponse(BaseModel):
    provider: str
    url: str


class AuthFlowResponse(BaseModel):
    mode: AuthMode
    message: Optional[str] = None
    user: Optional[AuthUser] = None
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    token_type: str = "bearer"


class CurrentUserResponse(BaseModel):
    id: str
    email: Optional[EmailStr] = None
    username: Optional[str] = None
    is_admin: bool = False
