"""FastAPI dependency injection functions for accessing application state."""
from fastapi import Request

from users_api.config import Settings
from users_api.database import UserStore


# Dependency injection functions
def get_user_store(request: Request) -> UserStore:
    """Get user store from state"""
    return request.state.user_store

def get_settings(request: Request) -> Settings:
    """Get settings from state"""
    return request.state.settings
