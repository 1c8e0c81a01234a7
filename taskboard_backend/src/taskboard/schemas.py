from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

# Form values arrive as strings; JSON bodies may carry numbers (e.g. phone).
_FORM_CONFIG = ConfigDict(
    populate_by_name=True,
    coerce_numbers_to_str=True,
    extra="ignore",
)


class _Document(BaseModel):
    model_config = _FORM_CONFIG

    def to_document(self) -> Dict[str, Any]:
        """Return the fields keyed by their stored (camelCase) names."""
        return self.model_dump(by_alias=True)


# PUBLIC_INTERFACE
class UserCreate(_Document):
    """
    Registration payload. Every field is optional and stored as submitted;
    no format checks are applied.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Ada",
                "lastName": "Lovelace",
                "phone": "5550100",
                "email": "ada@example.com",
                "password": "secret",
            }
        },
    )

    name: Optional[str] = Field(default=None, description="First name")
    last_name: Optional[str] = Field(default=None, alias="lastName", description="Last name")
    phone: Optional[str] = Field(default=None, description="Phone number")
    email: Optional[str] = Field(default=None, description="Email address")
    password: Optional[str] = Field(default=None, description="Password, stored as submitted")


# PUBLIC_INTERFACE
class LoginCreate(_Document):
    """Credential record payload."""

    email: Optional[str] = Field(default=None, description="Email address")
    password: Optional[str] = Field(default=None, description="Password, stored as submitted")


# PUBLIC_INTERFACE
class TaskCreate(_Document):
    """
    Add-task form payload. New tasks always start with completed=False, so
    'completed' is not accepted here.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "task": "Write report",
                "date": "2024-01-01",
                "description": "Quarterly numbers",
                "time": "10:00",
                "categoryChoosed": "work",
            }
        },
    )

    task: Optional[str] = Field(default=None, description="Task title")
    date: Optional[str] = Field(default=None, description="Due date as entered")
    description: Optional[str] = Field(default=None, description="Free-text description")
    time: Optional[str] = Field(default=None, description="Due time as entered")
    category_choosed: Optional[str] = Field(
        default=None, alias="categoryChoosed", description="Category label"
    )


# PUBLIC_INTERFACE
class TaskUpdate(_Document):
    """
    Partial update of a task. Only fields that were explicitly set end up in
    the stored patch.
    """

    task: Optional[str] = None
    date: Optional[str] = None
    description: Optional[str] = None
    time: Optional[str] = None
    category_choosed: Optional[str] = Field(default=None, alias="categoryChoosed")
    completed: Optional[bool] = None

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)
