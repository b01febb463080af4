from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

# Each document model corresponds to a MongoDB collection named after the lowercased class name

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


class Priority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class TaskStatus(str, Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"


def _coerce_due_date(v: Any) -> Any:
    # Mongo hands dates back as datetimes; the API only speaks calendar days
    if isinstance(v, datetime):
        return v.date()
    if v == "":
        return None
    return v


class Task(BaseModel):
    id: Optional[str] = Field(default=None, alias="_id")
    owner: str
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)
    due_date: Optional[date] = None
    priority: Priority = Priority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        populate_by_name = True
        alias_generator = to_camel

    @field_validator("description", mode="before")
    @classmethod
    def _none_description(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("due_date", mode="before")
    @classmethod
    def _due_date(cls, v: Any) -> Any:
        return _coerce_due_date(v)


class TaskCreate(BaseModel):
    title: str = Field(..., max_length=TITLE_MAX_LENGTH)
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)
    due_date: Optional[date] = None
    priority: Priority = Priority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING

    class Config:
        populate_by_name = True
        alias_generator = to_camel
        str_strip_whitespace = True

    @field_validator("title")
    @classmethod
    def _title_required(cls, v: str) -> str:
        if not v:
            raise ValueError("Title is required")
        return v

    @field_validator("description", mode="before")
    @classmethod
    def _none_description(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("due_date", mode="before")
    @classmethod
    def _due_date(cls, v: Any) -> Any:
        return _coerce_due_date(v)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class TaskUpdate(BaseModel):
    """Partial update. Only fields present in the request body are applied;
    owner, id and timestamps are not fields here and are dropped if sent."""

    title: Optional[str] = Field(default=None, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    due_date: Optional[date] = None
    priority: Optional[Priority] = None
    status: Optional[TaskStatus] = None

    class Config:
        populate_by_name = True
        alias_generator = to_camel
        str_strip_whitespace = True

    @field_validator("title", "priority", "status", mode="before")
    @classmethod
    def _not_null(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator("title")
    @classmethod
    def _title_required(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v:
            raise ValueError("Title is required")
        return v

    @field_validator("description", mode="before")
    @classmethod
    def _none_description(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("due_date", mode="before")
    @classmethod
    def _due_date(cls, v: Any) -> Any:
        return _coerce_due_date(v)

    def to_updates(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class DeleteConfirmation(BaseModel):
    message: str = "Task deleted"
