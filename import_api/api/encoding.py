# =============================================================================
# Import API - Body Decoding & Response Encoding
# =============================================================================
"""
Conversions at the edges of the import pipeline.

``bytes_to_utf8`` turns the raw request body into the text the engine
imports. ``encode_response`` serializes the engine's result in the format
the client negotiated: the generic formats carry the engine's simplified
form, the native format carries the result untouched.
"""

from typing import Any, Callable, Dict

import cbor2
import msgpack
from fastapi import Response, status
from fastapi.responses import JSONResponse

from ..engine import Engine
from ..errors import DecodeError
from ..models import ResponseFormat


def bytes_to_utf8(body: bytes) -> str:
    """
    Decode a request body as strict UTF-8.

    Raises:
        DecodeError: If the body contains an invalid byte sequence
    """
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"Request body is not valid UTF-8 (invalid byte at offset {e.start})") from e


def _json(engine: Engine, result: Any) -> Response:
    return JSONResponse(content=engine.simplify(result))


def _cbor(engine: Engine, result: Any) -> Response:
    return Response(
        content=cbor2.dumps(engine.simplify(result)),
        media_type=ResponseFormat.CBOR.value,
    )


def _pack(engine: Engine, result: Any) -> Response:
    return Response(
        content=msgpack.packb(engine.simplify(result), use_bin_type=True),
        media_type=ResponseFormat.PACK.value,
    )


def _none(engine: Engine, result: Any) -> Response:
    return Response(status_code=status.HTTP_200_OK, media_type=ResponseFormat.OCTET_STREAM.value)


def _native(engine: Engine, result: Any) -> Response:
    return Response(
        content=engine.dump_native(result),
        media_type=ResponseFormat.NATIVE.value,
    )


ENCODERS: Dict[ResponseFormat, Callable[[Engine, Any], Response]] = {
    ResponseFormat.JSON: _json,
    ResponseFormat.CBOR: _cbor,
    ResponseFormat.PACK: _pack,
    ResponseFormat.OCTET_STREAM: _none,
    ResponseFormat.NATIVE: _native,
}


def encode_response(engine: Engine, response_format: ResponseFormat, result: Any) -> Response:
    """Serialize an import result in the negotiated format."""
    return ENCODERS[response_format](engine, result)
