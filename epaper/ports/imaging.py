from typing import Protocol


class ImageProcessingError(RuntimeError):
    """Raised when an image cannot be decoded or encoded."""


class ImageProcessorPort(Protocol):
    def compress_image(self, data: bytes, max_width: int, quality: float) -> str:
        """Scale to at most max_width and re-encode; returns a data URL."""
        ...

    def generate_placeholder(self, width: int, height: int, label: str = "Placeholder") -> str:
        """PNG data URL with a random fill and a centred label."""
        ...
