"""
Capability clients.

Each external service is reached through one narrow adapter. The SDK client
behind an adapter is created on first use, so a Capabilities bundle can be
built cheaply and swapped for fakes in tests.
"""

from dataclasses import dataclass
from typing import Any

from core.utils.config import Settings

from .conversational_agent import ConversationalAgent
from .document_store import DocumentStore
from .image_labeler import ImageLabeler, ImageLabelingError
from .resource_store import BinaryResourceStore, split_gcs_reference, to_jpeg
from .text_generator import TextGenerator


@dataclass
class Capabilities:
    """The external services an operation set depends on."""
    labeler: Any
    generator: Any
    agent: Any
    documents: Any
    resources: Any

    @classmethod
    def from_settings(cls, settings: Settings) -> "Capabilities":
        timeout_s = settings.capability_timeout_s
        return cls(
            labeler=ImageLabeler(timeout_s=timeout_s),
            generator=TextGenerator(
                model=settings.genai_model,
                api_key=settings.genai_api_key,
                use_vertexai=settings.genai_use_vertexai,
                project=settings.project_id,
                location=settings.genai_location,
                timeout_s=timeout_s,
            ),
            agent=ConversationalAgent(
                project_id=settings.project_id,
                location=settings.agent_location,
                agent_id=settings.agent_id,
                timeout_s=timeout_s,
            ),
            documents=DocumentStore(project_id=settings.project_id, timeout_s=timeout_s),
            resources=BinaryResourceStore(
                default_bucket=settings.storage_bucket,
                timeout_s=settings.fetch_timeout_s,
                max_workers=settings.fetch_max_workers,
            ),
        )


__all__ = [
    'Capabilities',
    'ConversationalAgent',
    'DocumentStore',
    'ImageLabeler',
    'ImageLabelingError',
    'BinaryResourceStore',
    'TextGenerator',
    'split_gcs_reference',
    'to_jpeg',
]
