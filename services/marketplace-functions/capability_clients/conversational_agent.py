"""
Conversational agent through Dialogflow CX sessions.
"""

import logging
from typing import Any, Dict, Optional

from google.cloud import dialogflowcx_v3

logger = logging.getLogger(__name__)


class ConversationalAgent:
    """Detect-intent calls against one Dialogflow CX agent."""

    def __init__(
        self,
        project_id: Optional[str],
        location: str,
        agent_id: str,
        client: Optional[Any] = None,
        timeout_s: Optional[float] = None,
    ):
        self.project_id = project_id
        self.location = location
        self.agent_id = agent_id
        self.timeout_s = timeout_s
        self._client = client

    @property
    def client(self):
        if self._client is None:
            # Regional agents are only reachable through their regional endpoint
            if self.location == "global":
                endpoint = "dialogflow.googleapis.com"
            else:
                endpoint = f"{self.location}-dialogflow.googleapis.com"
            logger.info(f"[Dialogflow] Creating SessionsClient - endpoint: {endpoint}")
            self._client = dialogflowcx_v3.SessionsClient(client_options={"api_endpoint": endpoint})
        return self._client

    def session_path(self, session_id: str) -> str:
        return dialogflowcx_v3.SessionsClient.session_path(
            self.project_id,
            self.location,
            self.agent_id,
            session_id,
        )

    def detect_intent(self, request: Dict[str, Any]) -> Any:
        """
        Send one detect-intent request.

        Args:
            request: {"session": ..., "query_input": {"text": {"text": ...}, "language_code": ...}}

        Returns:
            DetectIntentResponse
        """
        logger.info(f"[Dialogflow] detect_intent - session: {request.get('session')}")
        return self.client.detect_intent(request=request, timeout=self.timeout_s)
