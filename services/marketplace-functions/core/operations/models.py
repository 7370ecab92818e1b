"""
Validated request models, one per operation.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OperationRequest(BaseModel):
    """Base for validated requests. Numbers sent for text fields are accepted as text."""
    model_config = ConfigDict(coerce_numbers_to_str=True)


class LabelRequest(OperationRequest):
    imageUrl: str


class DescriptionRequest(OperationRequest):
    productInfo: str


class AgentChatRequest(OperationRequest):
    sessionId: str
    text: str


class GenAIChatRequest(OperationRequest):
    text: str = ""


class ProductCopyRequest(OperationRequest):
    name: str
    price: Any = ""
    prompt: str
    imageUrl: Optional[str] = None


class SaveRecordRequest(OperationRequest):
    collection: str
    data: Dict[str, Any]


class ListingRequest(OperationRequest):
    imageUrls: List[str] = Field(min_length=1)
    # Present but not type-checked
    price: Any
    language: str

    @field_validator("imageUrls")
    @classmethod
    def _non_empty_references(cls, value: List[str]) -> List[str]:
        if any(not reference.strip() for reference in value):
            raise ValueError("image references must be non-empty")
        return value
