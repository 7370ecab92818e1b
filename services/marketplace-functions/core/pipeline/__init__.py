"""
Request pipeline: validate -> build -> invoke -> normalize, plus its failure taxonomy.
"""

from .errors import (
    PipelineError,
    MissingField,
    CapabilityError,
    CapabilityTimeout,
    MalformedCapabilityOutput,
    WriteError,
)
from .validator import Validator, FieldRule, required, is_missing
from .invoker import CapabilityInvoker, RequestDeadline
from .normalizer import (
    extract_text,
    extract_list,
    parse_listing_text,
    normalize_listing_fields,
)
from .pipeline import Operation, RequestPipeline

__all__ = [
    'PipelineError',
    'MissingField',
    'CapabilityError',
    'CapabilityTimeout',
    'MalformedCapabilityOutput',
    'WriteError',
    'Validator',
    'FieldRule',
    'required',
    'is_missing',
    'CapabilityInvoker',
    'RequestDeadline',
    'extract_text',
    'extract_list',
    'parse_listing_text',
    'normalize_listing_fields',
    'Operation',
    'RequestPipeline',
]
