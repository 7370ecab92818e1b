"""
Product description generation.

generate-description writes copy from free-form product info.
generate-product-copy writes copy from name, price and an extra instruction.
"""

from typing import Any, Dict

from core.pipeline import Operation, Validator, extract_text

from .models import DescriptionRequest, ProductCopyRequest
from .prompts import DESCRIPTION_PROMPT, build_product_copy_prompt

NO_DESCRIPTION = "No description generated"


def normalize_description(result: Any, request: Any) -> Dict[str, Any]:
    return {"description": extract_text(result, default=NO_DESCRIPTION)}


def build_description_operation(generator: Any) -> Operation:
    return Operation(
        name="generate-description",
        capability="Text generation",
        validate=Validator(DescriptionRequest, defaults={"productInfo": "A new product"}),
        build=lambda request: DESCRIPTION_PROMPT.format(product_info=request.productInfo),
        call=generator.generate,
        normalize=normalize_description,
    )


def _product_copy_prompt(request: ProductCopyRequest) -> str:
    return build_product_copy_prompt(request.name, request.price, request.prompt, request.imageUrl)


def build_product_copy_operation(generator: Any) -> Operation:
    return Operation(
        name="generate-product-copy",
        capability="Text generation",
        validate=Validator(
            ProductCopyRequest,
            defaults={
                "name": "Product",
                "price": "",
                "prompt": "Generate a product description.",
            },
        ),
        build=_product_copy_prompt,
        call=generator.generate,
        normalize=normalize_description,
    )
