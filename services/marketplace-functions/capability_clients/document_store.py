"""
Document store backed by Firestore.
"""

import logging
from typing import Any, Dict, Optional

from google.cloud import firestore

logger = logging.getLogger(__name__)


class DocumentStore:
    """Adds documents to Firestore collections."""

    def __init__(self, project_id: Optional[str] = None, client: Optional[Any] = None, timeout_s: Optional[float] = None):
        self.project_id = project_id
        self.timeout_s = timeout_s
        self._client = client

    @property
    def client(self):
        if self._client is None:
            logger.info(f"[Firestore] Creating client for project: {self.project_id}")
            self._client = firestore.Client(project=self.project_id)
        return self._client

    def add(self, collection: str, data: Dict[str, Any]) -> str:
        """
        Create one document with a generated id.

        The client library retry is disabled: a write is attempted once.

        Returns:
            The generated document id
        """
        _, doc_ref = self.client.collection(collection).add(data, retry=None, timeout=self.timeout_s)
        logger.info(f"[Firestore] Created document {doc_ref.id} in {collection}")
        return doc_ref.id
