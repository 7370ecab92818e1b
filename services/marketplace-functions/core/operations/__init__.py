"""
Operation registry.

Every externally addressable operation is bound here to the capability it
forwards to:

    extract-labels         image reference -> labels               (Vision)
    analyze-image          alias of extract-labels                 (Vision)
    generate-description   product info -> description             (Gemini)
    generate-product-copy  name/price/prompt -> description        (Gemini)
    chat                   session + text -> agent reply           (Dialogflow CX)
    chat-genai             text -> model reply                     (Gemini)
    save-record            collection + data -> document id        (Firestore)
    generate-listing       photos + price + language -> listing    (Storage + Gemini)
"""

from typing import Dict

from capability_clients import Capabilities
from core.pipeline import Operation
from core.utils.config import Settings

from .chat import build_chat_operation, build_genai_chat_operation
from .descriptions import build_description_operation, build_product_copy_operation
from .labels import build_label_operation
from .listing import build_listing_operation
from .records import build_save_record_operation


def build_operations(capabilities: Capabilities, settings: Settings) -> Dict[str, Operation]:
    """Bind every operation to the given capabilities, keyed by operation name."""
    operations = [
        build_label_operation(capabilities.labeler),
        build_label_operation(capabilities.labeler, name="analyze-image"),
        build_description_operation(capabilities.generator),
        build_product_copy_operation(capabilities.generator),
        build_chat_operation(capabilities.agent, language_code=settings.agent_language_code),
        build_genai_chat_operation(capabilities.generator),
        build_save_record_operation(capabilities.documents),
        build_listing_operation(capabilities.generator, capabilities.resources),
    ]
    return {operation.name: operation for operation in operations}


__all__ = ['build_operations']
