"""
Shared fixtures: fake capabilities and a pipeline wired to them.
"""

import sys
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

SERVICE_PATH = Path(__file__).parent.parent / "services" / "marketplace-functions"
sys.path.insert(0, str(SERVICE_PATH))

from capability_clients import BinaryResourceStore, Capabilities  # noqa: E402
from core.operations import build_operations  # noqa: E402
from core.pipeline import CapabilityInvoker, RequestPipeline  # noqa: E402
from core.utils.config import Settings  # noqa: E402


def make_image_bytes(color=(200, 120, 40), fmt="PNG", mode="RGB") -> bytes:
    img = Image.new(mode, (8, 8), color)
    buffer = BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


class FakeLabeler:
    def __init__(self, response=None, error=None):
        self.response = response if response is not None else {"label_annotations": []}
        self.error = error
        self.calls = []

    def label_detection(self, image_uri):
        self.calls.append(image_uri)
        if self.error:
            raise self.error
        return self.response


class FakeGenerator:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def generate(self, contents, model=None):
        self.calls.append(contents)
        if self.error:
            raise self.error
        return self.response


class FakeAgent:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def session_path(self, session_id):
        return f"projects/test-project/locations/us-central1/agents/test-agent/sessions/{session_id}"

    def detect_intent(self, request):
        self.calls.append(request)
        if self.error:
            raise self.error
        return self.response


class FakeDocuments:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def add(self, collection, data):
        self.calls.append((collection, data))
        if self.error:
            raise self.error
        return f"doc-{len(self.calls)}"


class FakeBlob:
    def __init__(self, storage, bucket_name, path):
        self.storage = storage
        self.bucket_name = bucket_name
        self.path = path

    def download_as_bytes(self, timeout=None):
        reference = f"gs://{self.bucket_name}/{self.path}"
        self.storage.downloads.append(reference)
        if reference in self.storage.failures:
            raise self.storage.failures[reference]
        if reference not in self.storage.objects:
            raise FileNotFoundError(reference)
        return self.storage.objects[reference]


class FakeBucket:
    def __init__(self, storage, name):
        self.storage = storage
        self.name = name

    def blob(self, path):
        return FakeBlob(self.storage, self.name, path)


class FakeStorageClient:
    """Cloud Storage stand-in keyed by gs:// reference."""

    def __init__(self, objects=None, failures=None):
        self.objects = dict(objects or {})
        self.failures = dict(failures or {})
        self.downloads = []

    def bucket(self, name):
        return FakeBucket(self, name)


@pytest.fixture
def storage_client():
    return FakeStorageClient()


@pytest.fixture
def capabilities(storage_client):
    return Capabilities(
        labeler=FakeLabeler(),
        generator=FakeGenerator(),
        agent=FakeAgent(),
        documents=FakeDocuments(),
        resources=BinaryResourceStore(default_bucket="shop-uploads", storage_client=storage_client, max_workers=3),
    )


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def operations(capabilities, settings):
    return build_operations(capabilities, settings)


@pytest.fixture
def pipeline():
    return RequestPipeline(CapabilityInvoker(timeout_s=5.0, max_retries=0))


@pytest.fixture
def image_bytes():
    return make_image_bytes
