from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.esg import as_utc, to_json_name


class User(BaseModel):
    model_config = ConfigDict(alias_generator=to_json_name, populate_by_name=True, from_attributes=True)

    id: str
    name: str
    email: str
    password_hash: str = Field(..., exclude=True)
    created_at: datetime

    @field_validator("created_at", mode="after")
    @classmethod
    def _created_in_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_json_name, populate_by_name=True, from_attributes=True)

    id: str
    name: str
    email: str
    created_at: datetime


class OkResponse(BaseModel):
    ok: bool = True
