from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel
from typing import Any, List, Optional

MIN_PASSWORD_LENGTH = 6


class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserSummary(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    email: str
    created_at: Optional[str] = None


class UserData(BaseModel):
    """Goal/roadmap state synced from the app; shape owned by the mobile client."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    goal: Optional[str] = None
    timeline: Optional[str] = None
    time_commitment: Optional[str] = None
    answers: Optional[List[Any]] = None
    roadmap: Optional[Any] = None
    completed_tasks: Optional[List[Any]] = None
    streak_data: Optional[Any] = None
    task_timers: Optional[List[Any]] = None
    last_sync_at: Optional[str] = None


class SignupResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user: UserSummary
    token: str
    supabase_user_id: Optional[str] = None


class LoginResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user: UserSummary
    token: str
    user_data: Optional[UserData] = None
