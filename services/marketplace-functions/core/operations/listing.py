"""
AI product listing generation from product photos.

The request builder downloads every referenced image (parallel, all or
nothing) and attaches them inline to the listing prompt. The generated text
must contain a JSON object with title, region, description and features.
"""

import logging
from typing import Any, Dict, List

from capability_clients.text_generator import TextGenerator
from core.pipeline import (
    FieldRule,
    Operation,
    Validator,
    extract_text,
    normalize_listing_fields,
    parse_listing_text,
)
from core.utils.extraction import get_path

from .models import ListingRequest
from .prompts import DEFAULT_LISTING_LANGUAGE, build_listing_prompt, format_price

logger = logging.getLogger(__name__)

LISTING_FAILURE = "Failed to generate listing"


def listing_text(result: Any) -> str:
    """Aggregated response text, falling back to the first candidate part."""
    text = get_path(result, ("text",), None)
    if isinstance(text, str):
        return text
    return extract_text(result)


def normalize_listing(result: Any, request: ListingRequest) -> Dict[str, Any]:
    listing = parse_listing_text(listing_text(result))
    data = normalize_listing_fields(listing)
    data["price"] = format_price(request.price)
    data["language"] = request.language
    return {"success": True, "data": data}


def build_listing_operation(generator: Any, resources: Any) -> Operation:
    def build_contents(request: ListingRequest) -> List[Any]:
        images = resources.fetch_images(request.imageUrls)
        prompt = build_listing_prompt(len(images), request.price, request.language)
        logger.info(f"Built listing prompt with {len(images)} image(s), language: {request.language}")
        return [prompt] + [TextGenerator.inline_image(data) for data in images]

    return Operation(
        name="generate-listing",
        capability="Listing generation",
        validate=Validator(
            ListingRequest,
            required=(
                FieldRule("imageUrls", "At least one image URL is required"),
                FieldRule("price", "Price is required"),
            ),
            defaults={"language": DEFAULT_LISTING_LANGUAGE},
        ),
        build=build_contents,
        call=generator.generate,
        normalize=normalize_listing,
        failure_message=LISTING_FAILURE,
    )
