"""Models for object recognition results."""

from pydantic import BaseModel, ConfigDict, Field


class RoomObjects(BaseModel):
    """Structured output for object recognition."""

    model_config = ConfigDict(populate_by_name=True)

    object_names: list[str] = Field(alias="objectNames")
