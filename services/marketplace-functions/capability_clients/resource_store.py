"""
Binary resource store for image references.

Resolves references to raw bytes:
    gs://bucket/path  -> Cloud Storage object
    http(s)://...     -> HTTP GET
    path              -> object in the default bucket

Image bytes are verified and re-encoded as RGB JPEG before being attached to
generation requests.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from io import BytesIO
from typing import Any, List, Optional, Sequence, Tuple

import requests
from google.cloud import storage
from PIL import Image

from core.pipeline.errors import CapabilityError

logger = logging.getLogger(__name__)

GCS_SCHEME = "gs://"


def split_gcs_reference(reference: str, default_bucket: Optional[str] = None) -> Tuple[str, str]:
    """
    Split a storage reference into (bucket, object path).

    Raises:
        ValueError: If the reference names no bucket and there is no default bucket
    """
    if reference.startswith(GCS_SCHEME):
        bucket_name, _, blob_path = reference[len(GCS_SCHEME):].partition("/")
        if not bucket_name or not blob_path:
            raise ValueError(f"Invalid storage reference: {reference}")
        return bucket_name, blob_path

    if not default_bucket:
        raise ValueError(f"No bucket configured for storage path: {reference}")
    return default_bucket, reference.lstrip("/")


def to_jpeg(data: bytes) -> bytes:
    """Verify image bytes and re-encode them as RGB JPEG."""
    img = Image.open(BytesIO(data))
    img.verify()

    # verify() leaves the image unusable, re-open before converting
    img = Image.open(BytesIO(data))
    if img.mode != "RGB":
        img = img.convert("RGB")

    buffer = BytesIO()
    img.save(buffer, format="JPEG")
    return buffer.getvalue()


class BinaryResourceStore:
    """Fetches image bytes from Cloud Storage or HTTP."""

    def __init__(
        self,
        default_bucket: Optional[str] = None,
        storage_client: Optional[Any] = None,
        http_session: Optional[requests.Session] = None,
        timeout_s: float = 30.0,
        max_workers: int = 4,
    ):
        self.default_bucket = default_bucket
        self.timeout_s = timeout_s
        self.max_workers = max(1, max_workers)
        self._storage_client = storage_client
        self._http_session = http_session

    @property
    def storage_client(self):
        if self._storage_client is None:
            logger.info("[Storage] Creating Cloud Storage client")
            self._storage_client = storage.Client()
        return self._storage_client

    @property
    def http_session(self) -> requests.Session:
        if self._http_session is None:
            self._http_session = requests.Session()
        return self._http_session

    def fetch(self, reference: str) -> bytes:
        """Fetch the raw bytes behind a reference."""
        if reference.startswith(("http://", "https://")):
            response = self.http_session.get(reference, timeout=self.timeout_s)
            response.raise_for_status()
            return response.content

        bucket_name, blob_path = split_gcs_reference(reference, self.default_bucket)
        blob = self.storage_client.bucket(bucket_name).blob(blob_path)
        return blob.download_as_bytes(timeout=self.timeout_s)

    def fetch_image(self, reference: str) -> bytes:
        """Fetch a reference and return it as JPEG bytes."""
        return to_jpeg(self.fetch(reference))

    def fetch_images(self, references: Sequence[str]) -> List[bytes]:
        """
        Fetch every reference in parallel, preserving input order.

        All fetches must succeed; the first failure cancels the fetches that
        have not started and fails the whole batch.

        Raises:
            CapabilityError: If any reference cannot be fetched or decoded
        """
        total = len(references)
        if total == 0:
            return []

        results: List[Optional[bytes]] = [None] * total
        start_time = time.time()
        logger.info(f"[Storage] Fetching {total} image(s) (max {self.max_workers} concurrent)")

        executor = ThreadPoolExecutor(max_workers=min(self.max_workers, total))
        try:
            futures = {
                executor.submit(self.fetch_image, reference): idx
                for idx, reference in enumerate(references)
            }
            for future in as_completed(futures):
                idx = futures[future]
                try:
                    results[idx] = future.result()
                except Exception as e:
                    logger.error(f"[Storage] Failed to fetch image {idx + 1}/{total} ({references[idx]}): {e}")
                    for pending in futures:
                        pending.cancel()
                    raise CapabilityError("Image fetch", cause=e, message="Failed to fetch product images") from e
        finally:
            executor.shutdown(wait=False)

        elapsed = time.time() - start_time
        logger.info(f"[Storage] Fetched {total} image(s) in {elapsed:.2f}s")
        return results
