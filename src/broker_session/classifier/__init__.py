"""Classification of codec outcomes into session error kinds."""

from .error_classifier import (
    CODEC_ERRORS,
    OK,
    Outcome,
    check_reply,
    classify,
    translate_errors,
)
from .method_ids import METHOD_NAMES, method_name

__all__ = [
    "CODEC_ERRORS",
    "METHOD_NAMES",
    "OK",
    "Outcome",
    "check_reply",
    "classify",
    "method_name",
    "translate_errors",
]
