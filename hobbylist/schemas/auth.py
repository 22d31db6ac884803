# hobbylist/schemas/auth.py
from __future__ import annotations
from typing import Annotated
from pydantic import BaseModel, ConfigDict, EmailStr, Field

# Length and strength are checked by core.password_policy
PasswordStr = Annotated[str, Field(max_length=256)]

# ---------- Signup / Login ----------
class SignupIn(BaseModel):
    email: EmailStr
    password: PasswordStr

class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)

class LoginOut(BaseModel):
    token: str

# ---------- Password reset ----------
class ForgotPasswordIn(BaseModel):
    email: EmailStr

class ResetPasswordIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str = Field(min_length=1, max_length=64)
    new_password: PasswordStr = Field(alias="newPassword")

# ---------- Responses ----------
class MessageOut(BaseModel):
    message: str

class UserOut(BaseModel):
    id: int
    email: EmailStr
    role: str
    active: bool = Field(validation_alias="is_active")

    model_config = ConfigDict(from_attributes=True)
