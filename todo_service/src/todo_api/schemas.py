from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

TITLE_MAX_LENGTH = 255
METADATA_PLACEHOLDER = "N/A"


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new Todo item. Only the title is accepted; the other
    fields take their database defaults.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"title": "Buy groceries"}})

    title: str = Field(..., description=f"Short title for the todo item (1..{TITLE_MAX_LENGTH} characters after trimming)")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """
        Strip whitespace, then enforce 1..TITLE_MAX_LENGTH characters.
        """
        s = v.strip()
        if not s:
            raise ValueError("title must not be empty")
        if len(s) > TITLE_MAX_LENGTH:
            raise ValueError(f"title must be at most {TITLE_MAX_LENGTH} characters")
        return s


# PUBLIC_INTERFACE
class TodoUpdate(BaseModel):
    """
    Schema for updating an existing Todo item. Only the completion flag can
    change, and it must be present.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"completed": True}})

    completed: bool = Field(..., description="Completion status flag")


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 123,
                "title": "Buy groceries",
                "completed": False,
                "created_at": "2025-01-25T10:15:30",
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the todo item")
    title: str = Field(..., description="Short title for the todo item")
    completed: bool = Field(..., description="Completion status flag")
    created_at: datetime = Field(..., description="Creation timestamp")


class MessageOut(BaseModel):
    """Confirmation body returned by mutating endpoints."""

    message: str = Field(..., description="Human readable outcome")


class DatabaseStatus(BaseModel):
    """Readiness probe body."""

    status: str = Field(..., description="'healthy' or 'unhealthy'")
    database: str = Field(..., description="'connected' or 'disconnected'")


class InstanceMetadata(BaseModel):
    """
    Identity facts of the host instance. Serialized with camelCase keys
    (instanceId, availabilityZone, privateIp); unavailable values are 'N/A'.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    instance_id: str = Field(default=METADATA_PLACEHOLDER, description="EC2 instance id")
    availability_zone: str = Field(default=METADATA_PLACEHOLDER, description="Placement availability zone")
    private_ip: str = Field(default=METADATA_PLACEHOLDER, description="Private IPv4 address")
