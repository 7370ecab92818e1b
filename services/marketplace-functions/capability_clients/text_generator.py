"""
Text generation with Gemini through the google-genai SDK.

Uses the Vertex AI backend when configured, otherwise the Gemini API key.
"""

import logging
from typing import Any, List, Optional, Union

from google import genai
from google.genai import types

logger = logging.getLogger(__name__)

Content = Union[str, types.Part]


class TextGenerator:
    """Wrapper around genai.Client().models.generate_content for one model."""

    def __init__(
        self,
        model: str = "gemini-2.5-flash",
        api_key: Optional[str] = None,
        use_vertexai: bool = False,
        project: Optional[str] = None,
        location: str = "us-central1",
        timeout_s: Optional[float] = None,
        client: Optional[Any] = None,
    ):
        self.model = model
        self.api_key = api_key
        self.use_vertexai = use_vertexai
        self.project = project
        self.location = location
        self.timeout_s = timeout_s
        self._client = client

    @property
    def client(self):
        if self._client is None:
            http_options = None
            if self.timeout_s:
                http_options = types.HttpOptions(timeout=int(self.timeout_s * 1000))

            if self.use_vertexai:
                logger.info(f"[GenAI] Creating Vertex AI client - project: {self.project}, location: {self.location}")
                self._client = genai.Client(
                    vertexai=True,
                    project=self.project,
                    location=self.location,
                    http_options=http_options,
                )
            else:
                logger.info("[GenAI] Creating Gemini API client")
                self._client = genai.Client(api_key=self.api_key, http_options=http_options)
        return self._client

    def generate(self, contents: Union[Content, List[Content]], model: Optional[str] = None) -> Any:
        """
        Generate content from a prompt, optionally followed by inline parts.

        Returns:
            GenerateContentResponse
        """
        model_name = model or self.model
        part_count = len(contents) if isinstance(contents, list) else 1
        logger.info(f"[GenAI] generate_content - model: {model_name}, parts: {part_count}")
        return self.client.models.generate_content(model=model_name, contents=contents)

    @staticmethod
    def inline_image(data: bytes, mime_type: str = "image/jpeg") -> types.Part:
        """Wrap raw image bytes as an inline attachment."""
        return types.Part.from_bytes(data=data, mime_type=mime_type)
