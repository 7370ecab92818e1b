"""
Chat operations: the Dialogflow CX agent and direct Gemini chat.
"""

import time
from typing import Any, Dict, Optional

from core.pipeline import Operation, Validator, extract_text
from core.utils.extraction import get_path

from .models import AgentChatRequest, GenAIChatRequest

NO_AGENT_REPLY = "No response from agent"
NO_AI_REPLY = "No response from AI."
EMPTY_PROMPT_REPLY = "Please ask me something!"

AGENT_REPLY_PATH = ("query_result", "response_messages", 0, "text", "text", 0)


def new_session_id() -> str:
    """Session id derived from the current time in milliseconds."""
    return str(int(time.time() * 1000))


def normalize_agent_reply(result: Any, request: AgentChatRequest) -> Dict[str, Any]:
    return {"reply": get_path(result, AGENT_REPLY_PATH, NO_AGENT_REPLY)}


def build_chat_operation(agent: Any, language_code: str = "en") -> Operation:
    def build_request(request: AgentChatRequest) -> Dict[str, Any]:
        return {
            "session": agent.session_path(request.sessionId),
            "query_input": {
                "text": {"text": request.text},
                "language_code": language_code,
            },
        }

    return Operation(
        name="chat",
        capability="Conversational agent",
        validate=Validator(
            AgentChatRequest,
            defaults={"sessionId": new_session_id, "text": "Hello"},
        ),
        build=build_request,
        call=agent.detect_intent,
        normalize=normalize_agent_reply,
    )


def _empty_prompt(request: GenAIChatRequest) -> Optional[Dict[str, Any]]:
    if not request.text:
        return {"reply": EMPTY_PROMPT_REPLY}
    return None


def build_genai_chat_operation(generator: Any) -> Operation:
    return Operation(
        name="chat-genai",
        capability="Text generation",
        validate=Validator(GenAIChatRequest),
        build=lambda request: request.text,
        call=generator.generate,
        normalize=lambda result, request: {"reply": extract_text(result, default=NO_AI_REPLY)},
        short_circuit=_empty_prompt,
    )
