"""
Prompt templates for the generation operations.
"""

from typing import Any

DEFAULT_LISTING_LANGUAGE = "english"

LANGUAGE_GUIDES = {
    "english": "Write entirely in English. Keep it casual and friendly.",
    "hindi": "Write entirely in Hindi (Devanagari script). Keep it casual.",
    "hinglish": "Write in Hinglish (Hindi + English mix). Natural and casual.",
    "tamil": "Write entirely in Tamil script. Keep it casual.",
    "bengali": "Write entirely in Bengali script. Keep it casual.",
}

DESCRIPTION_PROMPT = "Write a creative and engaging product description for: {product_info}"

PRODUCT_COPY_PROMPT = "Write a creative product description for {name} (price: {price}). {prompt}"

LISTING_PROMPT = """You are helping an Indian artisan list their product online.

**LANGUAGE:** {language_guide}

**TONE:** Casual, friendly, conversational.

{image_count} image(s) provided.

Create a simple product listing with ONLY these fields:

{{
  "title": "Catchy, SEO-friendly title in {language} (60-80 characters)",
  "region": "Which part of India is this craft from? (Just state/region name)",
  "description": "2-3 engaging sentences in {language} (150 chars max)",
  "features": [
    "List 5-7 specific features in {language}",
    "Keep each point short and clear"
  ]
}}

Analyze the images and describe what you see. Focus on colors, patterns, materials, craftsmanship.

**CRITICAL:** Return ONLY valid JSON with these 4 fields. No extra text.
Price: {price}"""


def language_guide(language: str) -> str:
    """Guide for a language; unknown languages use the English guide."""
    return LANGUAGE_GUIDES.get(language.strip().lower(), LANGUAGE_GUIDES[DEFAULT_LISTING_LANGUAGE])


def format_price(price: Any) -> str:
    """Render a price with the rupee sign; integral floats drop their '.0'."""
    if isinstance(price, float) and price.is_integer():
        price = int(price)
    return f"₹{price}"


def build_listing_prompt(image_count: int, price: Any, language: str) -> str:
    return LISTING_PROMPT.format(
        language_guide=language_guide(language),
        image_count=image_count,
        language=language,
        price=format_price(price),
    )


def build_product_copy_prompt(name: str, price: Any, prompt: str, image_url: str = None) -> str:
    text = PRODUCT_COPY_PROMPT.format(name=name, price=price, prompt=prompt)
    if image_url:
        text = f"{text} Image: {image_url}"
    return text
