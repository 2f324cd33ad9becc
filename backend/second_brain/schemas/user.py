from pydantic import BaseModel, Field, field_validator
import re

USERNAME_MIN, USERNAME_MAX = 3, 10
PASSWORD_MIN, PASSWORD_MAX = 8, 20

PASSWORD_RULES = [
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter"),
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter"),
    (re.compile(r"[0-9]"), "Password must contain at least one number"),
    (re.compile(r"[^A-Za-z0-9]"), "Password must contain at least one special character"),
]


class SignupRequest(BaseModel):
    username: str = Field(min_length=USERNAME_MIN, max_length=USERNAME_MAX)
    password: str = Field(min_length=PASSWORD_MIN, max_length=PASSWORD_MAX)

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        """Reject the password with every character-class rule it breaks."""
        missing = [message for pattern, message in PASSWORD_RULES if not pattern.search(v)]
        if missing:
            raise ValueError("; ".join(missing))
        return v


class SigninRequest(BaseModel):
    username: str
    password: str


class TokenResponse(BaseModel):
    token: str


class MessageResponse(BaseModel):
    message: str
