"""유틸리티 모듈."""

from .json_parser import extract_json, strip_code_fences
from .validation import (
    validate_filename,
    validate_file_size,
    validate_file_extension,
    validate_content_type,
    validate_file_signature,
)

__all__ = [
    "extract_json",
    "strip_code_fences",
    "validate_filename",
    "validate_file_size",
    "validate_file_extension",
    "validate_content_type",
    "validate_file_signature",
]
