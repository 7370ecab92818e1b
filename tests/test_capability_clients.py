"""
Adapters against mocked SDK clients.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from google.genai import types

from capability_clients import (
    ConversationalAgent,
    DocumentStore,
    ImageLabeler,
    ImageLabelingError,
    TextGenerator,
)


def test_label_detection_sends_image_uri():
    client = MagicMock()
    client.label_detection.return_value = SimpleNamespace(
        error=SimpleNamespace(message=""),
        label_annotations=[SimpleNamespace(description="Pottery")],
    )
    labeler = ImageLabeler(client=client, timeout_s=20)

    response = labeler.label_detection("gs://shop-uploads/pot.jpg")

    assert response.label_annotations[0].description == "Pottery"
    kwargs = client.label_detection.call_args.kwargs
    assert kwargs["image"].source.image_uri == "gs://shop-uploads/pot.jpg"
    assert kwargs["timeout"] == 20


def test_label_detection_error_status():
    client = MagicMock()
    client.label_detection.return_value = SimpleNamespace(error=SimpleNamespace(message="Bad image data"))
    with pytest.raises(ImageLabelingError, match="Bad image data"):
        ImageLabeler(client=client).label_detection("https://example.com/a.jpg")


def test_text_generator_uses_configured_model():
    client = MagicMock()
    client.models.generate_content.return_value = "response"
    generator = TextGenerator(model="gemini-2.5-flash", client=client)

    assert generator.generate("Describe a lamp") == "response"
    client.models.generate_content.assert_called_once_with(model="gemini-2.5-flash", contents="Describe a lamp")

    generator.generate(["Describe", "these"], model="gemini-2.5-pro")
    assert client.models.generate_content.call_args.kwargs["model"] == "gemini-2.5-pro"


def test_inline_image_part():
    part = TextGenerator.inline_image(b"\xff\xd8\xff")
    assert isinstance(part, types.Part)
    assert part.inline_data.mime_type == "image/jpeg"
    assert part.inline_data.data == b"\xff\xd8\xff"


def test_session_path():
    agent = ConversationalAgent(project_id="crafts-prod", location="global", agent_id="agent-1", client=MagicMock())
    assert agent.session_path("12345") == "projects/crafts-prod/locations/global/agents/agent-1/sessions/12345"


def test_detect_intent_forwards_request():
    client = MagicMock()
    agent = ConversationalAgent(project_id="p", location="us-central1", agent_id="a", client=client, timeout_s=15)
    request = {"session": "s", "query_input": {"text": {"text": "Hi"}, "language_code": "en"}}

    agent.detect_intent(request)

    client.detect_intent.assert_called_once_with(request=request, timeout=15)


def test_document_add_is_attempted_once():
    client = MagicMock()
    collection = client.collection.return_value
    collection.add.return_value = (None, SimpleNamespace(id="abc123"))
    store = DocumentStore(project_id="p", client=client, timeout_s=10)

    assert store.add("widgets", {"name": "X"}) == "abc123"
    client.collection.assert_called_once_with("widgets")
    collection.add.assert_called_once_with({"name": "X"}, retry=None, timeout=10)
