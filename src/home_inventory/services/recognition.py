"""Object recognition over room photos using LLMs."""

from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError as PydanticValidationError

from home_inventory.domain.errors import RecognitionError
from home_inventory.domain.recognition import RoomObjects

RECOGNITION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "objectNames": {
            "type": "array",
            "items": {"type": "string"},
        }
    },
    "required": ["objectNames"],
    "additionalProperties": False,
}

RECOGNITION_PROMPT = (
    "These photos all show the same room. "
    "List the distinct physical objects visible across the photos, "
    "such as furniture, appliances, electronics and decor. "
    "Use short common names and list each object once."
)


class ObjectRecognitionClient(Protocol):
    """Interface for LLM object recognition."""

    async def describe(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        image_urls: list[str],
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return structured recognition data for the images."""


@dataclass
class RecognitionService:
    """Service that prepares recognition prompts and validates results."""

    client: ObjectRecognitionClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def identify(self, image_urls: list[str]) -> list[str]:
        """Identify objects across all images in a single request."""
        if not image_urls:
            raise RecognitionError("No images to analyze")
        try:
            raw = await self.client.describe(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                image_urls=list(image_urls),
                schema=RECOGNITION_SCHEMA,
                prompt=RECOGNITION_PROMPT,
            )
            result = RoomObjects.model_validate(raw)
        except RecognitionError:
            raise
        except PydanticValidationError as exc:
            raise RecognitionError("Malformed recognition response") from exc
        except Exception as exc:
            raise RecognitionError(f"Recognition request failed: {exc}") from exc
        object_names = [name.strip() for name in result.object_names if name.strip()]
        if not object_names:
            raise RecognitionError("No objects were identified")
        return object_names
