from dataclasses import dataclass
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class GenerationError(RuntimeError):
    """Any failure talking to the generative-content API."""


class GenerationConfig(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        protected_namespaces=(),
    )

    model_name: str = "gemini-2.5-flash"
    image_model_name: str = "gemini-2.5-flash-image"
    temperature: float = Field(default=0.7, ge=0, le=1)
    top_k: int = Field(default=64, gt=0)
    top_p: float = Field(default=0.95, ge=0, le=1)


@dataclass(frozen=True)
class GeneratedText:
    text: str


class TextGeneratorPort(Protocol):
    def generate_text(self, prompt: str, config: GenerationConfig) -> GeneratedText:
        """Raises GenerationError on any fault."""
        ...


class ImageGeneratorPort(Protocol):
    def generate_image(self, prompt: str, config: GenerationConfig) -> str | None:
        """Data URL of the first generated image, None if there is none."""
        ...
