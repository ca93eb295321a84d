"""OTLP/HTTP trace payload decoding and response encoding."""

from typing import Any, Iterable

from google.protobuf import json_format
from google.protobuf.message import DecodeError
from opentelemetry.proto.collector.trace.v1.trace_service_pb2 import (
    ExportTraceServiceRequest,
    ExportTraceServiceResponse,
)
from opentelemetry.proto.common.v1.common_pb2 import AnyValue, KeyValue

PROTOBUF_CONTENT_TYPE = "application/x-protobuf"
JSON_CONTENT_TYPE = "application/json"


class PayloadDecodeError(ValueError):
    """Request body is not a valid ExportTraceServiceRequest."""


def is_json(content_type: str | None) -> bool:
    """Whether the request uses the OTLP JSON encoding."""
    if not content_type:
        return False
    return content_type.split(";", 1)[0].strip().lower() == JSON_CONTENT_TYPE


def decode_export_request(body: bytes, content_type: str | None = None) -> ExportTraceServiceRequest:
    """Decode an export request body. Protobuf unless content_type says JSON."""
    request = ExportTraceServiceRequest()
    try:
        if is_json(content_type):
            json_format.Parse(body, request, ignore_unknown_fields=True)
        else:
            request.ParseFromString(body)
    except (DecodeError, json_format.ParseError, UnicodeDecodeError) as e:
        raise PayloadDecodeError(f"Invalid trace export payload: {e}") from e
    return request


def encode_empty_response(content_type: str | None = None) -> tuple[bytes, str]:
    """Empty success response in the same encoding as the request."""
    response = ExportTraceServiceResponse()
    if is_json(content_type):
        return json_format.MessageToJson(response).encode("utf-8"), JSON_CONTENT_TYPE
    return response.SerializeToString(), PROTOBUF_CONTENT_TYPE


def any_value_to_python(value: AnyValue) -> Any:
    """Convert an OTLP AnyValue into a plain Python value."""
    kind = value.WhichOneof("value")
    if kind is None:
        return None
    if kind == "array_value":
        return [any_value_to_python(v) for v in value.array_value.values]
    if kind == "kvlist_value":
        return attributes_to_dict(value.kvlist_value.values)
    return getattr(value, kind)


def attributes_to_dict(attributes: Iterable[KeyValue]) -> dict[str, Any]:
    """Convert OTLP KeyValue attributes into a dict. Later keys win."""
    return {kv.key: any_value_to_python(kv.value) for kv in attributes}
