"""
Image helpers: upload compression (Pillow) and placeholder rendering
(matplotlib Agg canvas). Both return base64 data URLs ready to be stored on
a block or page.
"""

from __future__ import annotations

import base64
import logging
import random
from io import BytesIO

import matplotlib.figure
from matplotlib.backends.backend_agg import FigureCanvasAgg
from PIL import Image, UnidentifiedImageError

from epaper.ports.imaging import ImageProcessingError

logger = logging.getLogger(__name__)

PLACEHOLDER_DPI = 100


def to_data_url(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def scaled_size(width: int, height: int, max_width: int) -> tuple[int, int]:
    """Proportional size with width capped at max_width."""
    if width > max_width:
        return max_width, max(1, round(height * max_width / width))
    return width, height


class ImageProcessor:
    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def compress_image(self, data: bytes, max_width: int, quality: float) -> str:
        """
        Re-encode an uploaded image as JPEG.

        Args:
            data: Raw image bytes in any format Pillow can decode
            max_width: Output width cap; height scales proportionally
            quality: Encoder quality between 0 and 1

        Returns:
            ``data:image/jpeg;base64,...``
        """
        try:
            with Image.open(BytesIO(data)) as img:
                img.load()
                width, height = scaled_size(img.width, img.height, max_width)
                out = img.convert("RGB")
                if (width, height) != out.size:
                    out = out.resize((width, height), Image.Resampling.LANCZOS)
        except (UnidentifiedImageError, OSError) as e:
            raise ImageProcessingError(f"Could not decode image: {e}") from e

        buf = BytesIO()
        out.save(buf, format="JPEG", quality=max(1, min(95, round(quality * 100))))
        logger.info("Compressed image to %dx%d (%d bytes)", width, height, buf.tell())
        return to_data_url(buf.getvalue(), "image/jpeg")

    def random_color(self) -> str:
        return f"#{self._rng.randint(0, 0xFFFFFF):06x}"

    def generate_placeholder(self, width: int, height: int, label: str = "Placeholder") -> str:
        if width <= 0 or height <= 0:
            raise ImageProcessingError("Placeholder size must be positive")

        fig = matplotlib.figure.Figure(
            figsize=(width / PLACEHOLDER_DPI, height / PLACEHOLDER_DPI), dpi=PLACEHOLDER_DPI
        )
        FigureCanvasAgg(fig)
        fig.patch.set_facecolor(self.random_color())

        # Label height is an eighth of the image height (pixels -> points)
        font_px = max(1, height // 8)
        fig.text(
            0.5,
            0.5,
            label,
            color="white",
            fontsize=font_px * 72 / PLACEHOLDER_DPI,
            ha="center",
            va="center",
        )

        buf = BytesIO()
        fig.savefig(buf, format="png", facecolor=fig.get_facecolor())
        return to_data_url(buf.getvalue(), "image/png")
