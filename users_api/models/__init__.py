"""Pydantic models shared by all services"""
from .user_models import (
    CreateUserRequest,
    ErrorResponse,
    HealthResponse,
    User,
    UserCreatedResponse,
    UserListResponse,
)

__all__ = [
    'CreateUserRequest',
    'ErrorResponse',
    'HealthResponse',
    'User',
    'UserCreatedResponse',
    'UserListResponse',
]
