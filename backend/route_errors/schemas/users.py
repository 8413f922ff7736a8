from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UserCreate(BaseModel):
    username: Annotated[str, Field(min_length=3, max_length=64, pattern=r"^[A-Za-z0-9_.-]+$")]
    display_name: Optional[Annotated[str, Field(max_length=200)]] = None

    @field_validator("username", mode="before")
    @classmethod
    def _trim(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [{"username": "alice", "display_name": "Alice Liddell"}]
        }
    )


class UserRead(BaseModel):
    id: str
    username: str
    display_name: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserLookup(BaseModel):
    """Error payload naming the username a request was about."""

    username: str
