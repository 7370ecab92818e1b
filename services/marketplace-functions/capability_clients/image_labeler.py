"""
Image labeling through Cloud Vision.
"""

import logging
from typing import Any, Optional

from google.cloud import vision

from core.utils.extraction import get_path

logger = logging.getLogger(__name__)


class ImageLabelingError(RuntimeError):
    """Vision answered with an error status instead of annotations."""


class ImageLabeler:
    """Thin wrapper around vision.ImageAnnotatorClient.label_detection."""

    def __init__(self, client: Optional[Any] = None, timeout_s: Optional[float] = None):
        self._client = client
        self.timeout_s = timeout_s

    @property
    def client(self):
        if self._client is None:
            logger.info("[Vision] Creating ImageAnnotatorClient")
            self._client = vision.ImageAnnotatorClient()
        return self._client

    def label_detection(self, image_uri: str) -> Any:
        """
        Run label detection on an image reference (gs:// or http(s) URI).

        Returns:
            AnnotateImageResponse with label_annotations in ranked order
        """
        image = vision.Image(source=vision.ImageSource(image_uri=image_uri))
        logger.info(f"[Vision] Label detection for: {image_uri}")
        response = self.client.label_detection(image=image, timeout=self.timeout_s)

        error_message = get_path(response, ("error", "message"), "")
        if error_message:
            raise ImageLabelingError(f"Vision API error: {error_message}")
        return response
