"""
Image label extraction.
"""

from typing import Any, Dict

from core.pipeline import Operation, Validator, extract_list, required

from .models import LabelRequest


def normalize_labels(result: Any, request: LabelRequest) -> Dict[str, Any]:
    """One label per annotation, in the order Vision ranked them."""
    return {"labels": extract_list(result, ("label_annotations",), ("description",), "")}


def build_label_operation(labeler: Any, name: str = "extract-labels") -> Operation:
    return Operation(
        name=name,
        capability="Image labeling",
        validate=Validator(LabelRequest, required=required("imageUrl")),
        build=lambda request: request.imageUrl,
        call=labeler.label_detection,
        normalize=normalize_labels,
    )
