"""Data models for user information"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, StrictStr


class User(BaseModel): #using pydantic for type safety
    """User record, same shape in memory and in the shared users table"""
    id: int
    name: str
    email: str  # not validated as an RFC-5322 address
    created_at: Optional[datetime] = None  # UTC, assigned server-side


class CreateUserRequest(BaseModel):
    """Body of a create-user call.
    Missing fields default to "" so emptiness is checked after decoding"""
    model_config = ConfigDict(extra="ignore")

    name: StrictStr = ""
    email: StrictStr = ""


class UserListResponse(BaseModel):
    """Listing envelope used by the versioned APIs"""
    data: List[User]
    count: Optional[int] = None
    meta: Dict[str, str]


class UserCreatedResponse(BaseModel):
    id: int
    message: str


class HealthResponse(BaseModel):
    status: str
    service: Optional[str] = None
    database: Optional[str] = None
    version: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str
    path: Optional[str] = None
