from pydantic import BaseModel, EmailStr, Field, field_validator
from barakaflow.utils.sanitization import sanitize_string


class UserBase(BaseModel):
    email: EmailStr
    name: str

    @field_validator("email", mode="after")
    @classmethod
    def normalize_email(cls, v):
        return v.lower()


class UserCreate(UserBase):
    password: str = Field(..., min_length=6)

    @field_validator("name", mode="before")
    @classmethod
    def sanitize(cls, v):
        v = sanitize_string(v)
        if isinstance(v, str) and not v:
            raise ValueError("Name is required")
        return v

    @field_validator("password")
    @classmethod
    def fits_bcrypt(cls, v):
        # bcrypt only looks at the first 72 bytes
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password must be at most 72 bytes long")
        return v


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email", mode="after")
    @classmethod
    def normalize_email(cls, v):
        return v.lower()


class UserResponse(UserBase):
    id: int

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserResponse


class VerifyResponse(BaseModel):
    user: UserResponse


class TokenData(BaseModel):
    user_id: int | None = None
