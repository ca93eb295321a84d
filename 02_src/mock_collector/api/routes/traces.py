"""OTLP trace ingestion routes."""

import gzip
import zlib

from fastapi import APIRouter, HTTPException, Request, Response

from ...config import TRACES_PATH
from ...errors import CollectorClosedError
from ...ingestion import ISpanSink
from ...logging_config import get_logger
from ...otlp import PayloadDecodeError, decode_export_request, encode_empty_response

logger = get_logger(__name__)


def _decompress(body: bytes, content_encoding: str | None) -> bytes:
    """Undo Content-Encoding. Only gzip and deflate are accepted."""
    encoding = (content_encoding or "identity").strip().lower()
    if encoding == "identity":
        return body
    try:
        if encoding == "gzip":
            return gzip.decompress(body)
        if encoding == "deflate":
            return zlib.decompress(body)
    except (OSError, zlib.error) as e:
        raise HTTPException(status_code=400, detail=f"Invalid {encoding} body: {e}")
    raise HTTPException(status_code=415, detail=f"Unsupported encoding: {encoding}")


def create_traces_router(sink: ISpanSink) -> APIRouter:
    """Create trace ingestion router."""
    router = APIRouter(tags=["traces"])

    @router.post(TRACES_PATH)
    async def export_traces(request: Request) -> Response:
        """Accept an export request; acknowledge once every span is queued."""
        content_type = request.headers.get("content-type")
        body = _decompress(
            await request.body(), request.headers.get("content-encoding")
        )

        try:
            export_request = decode_export_request(body, content_type)
        except PayloadDecodeError as e:
            logger.warning("Rejected trace payload: %s", e)
            raise HTTPException(status_code=400, detail=str(e))

        try:
            await sink.ingest(export_request)
        except CollectorClosedError as e:
            raise HTTPException(status_code=503, detail=str(e))

        payload, media_type = encode_empty_response(content_type)
        return Response(content=payload, media_type=media_type)

    return router
