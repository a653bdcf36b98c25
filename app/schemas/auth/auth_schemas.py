from pydantic import BaseModel, EmailStr, Field, model_validator
from typing import Literal


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)


class RegisterRequest(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class SessionUser(BaseModel):
    id: int
    email: EmailStr
    name: str
    role: str


class SessionOut(BaseModel):
    access_token: str
    token_type: Literal["bearer"] = "bearer"
    user: SessionUser
