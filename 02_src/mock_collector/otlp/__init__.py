"""OTLP wire codec module."""

from .codec import (
    JSON_CONTENT_TYPE,
    PROTOBUF_CONTENT_TYPE,
    PayloadDecodeError,
    any_value_to_python,
    attributes_to_dict,
    decode_export_request,
    encode_empty_response,
)

__all__ = [
    "JSON_CONTENT_TYPE",
    "PROTOBUF_CONTENT_TYPE",
    "PayloadDecodeError",
    "any_value_to_python",
    "attributes_to_dict",
    "decode_export_request",
    "encode_empty_response",
]
