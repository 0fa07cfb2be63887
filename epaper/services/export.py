"""
Simulated exports.

There is no real renderer: "image export" produces one labelled placeholder
PNG per page under the file name a real export would use.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from epaper.domain.entities import Edition
from epaper.ports.imaging import ImageProcessorPort
from epaper.rules.models import ImagesRules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportedImage:
    filename: str
    data_url: str


def export_filename(edition: Edition, page_number: int) -> str:
    stem = re.sub(r"\s", "_", edition.title)
    return f"{stem}_Page_{page_number}.png"


class ExportService:
    def __init__(self, image_processor: ImageProcessorPort, rules: ImagesRules):
        self.image_processor = image_processor
        self.rules = rules

    def export_images(self, edition: Edition | None) -> list[ExportedImage]:
        if edition is None or not edition.pages:
            raise ValueError("No edition selected for image export.")

        logger.info("Exporting %d page images for %s", len(edition.pages), edition.id)
        return [
            ExportedImage(
                filename=export_filename(edition, page.page_number),
                data_url=self.image_processor.generate_placeholder(
                    self.rules.export_width, self.rules.export_height, f"Page {page.page_number}"
                ),
            )
            for page in edition.pages
        ]
