from fastapi import Request

from second_brain.core.config import Settings
from second_brain.core.security import PasswordHasher


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher
