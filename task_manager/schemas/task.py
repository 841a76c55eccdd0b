from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime
from enum import Enum


class TaskFilter(str, Enum):
    ALL = "all"
    COMPLETED = "completed"
    PENDING = "pending"
    IMPORTANT = "important"

    @classmethod
    def parse(cls, value: Optional[str]) -> "TaskFilter":
        """Unknown or missing selectors fall back to ``all``."""
        try:
            return cls(value) if value else cls.ALL
        except ValueError:
            return cls.ALL


class TaskCreate(BaseModel):
    text: Optional[str] = None
    important: bool = False


class TaskUpdate(BaseModel):
    text: Optional[str] = None
    completed: Optional[bool] = None
    important: Optional[bool] = None


class TaskResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    text: str
    completed: bool = False
    important: bool = False
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class TaskStats(BaseModel):
    total: int = 0
    completed: int = 0
    pending: int = 0
    important: int = 0


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    database: str
