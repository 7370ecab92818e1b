"""
Record persistence. The write is never retried.
"""

from typing import Any, Dict, Tuple

from core.pipeline import FieldRule, Operation, Validator, WriteError

from .models import SaveRecordRequest

SAVED_MESSAGE = "Saved successfully"
MISSING_RECORD_FIELDS = "Missing collection or data"


def _as_write_error(error: Exception, request: SaveRecordRequest) -> WriteError:
    cause = getattr(error, "cause", None) or error
    return WriteError(request.collection, cause)


def build_save_record_operation(documents: Any) -> Operation:
    def build_write(request: SaveRecordRequest) -> Tuple[str, Dict[str, Any]]:
        return request.collection, request.data

    def write(args: Tuple[str, Dict[str, Any]]) -> str:
        collection, data = args
        return documents.add(collection, data)

    return Operation(
        name="save-record",
        capability="Document store",
        validate=Validator(
            SaveRecordRequest,
            required=(
                FieldRule("collection", MISSING_RECORD_FIELDS),
                FieldRule("data", MISSING_RECORD_FIELDS),
            ),
        ),
        build=build_write,
        call=write,
        normalize=lambda doc_id, request: {"id": doc_id, "message": SAVED_MESSAGE},
        idempotent=False,
        on_call_error=_as_write_error,
    )
