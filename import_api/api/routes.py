"""
Import API - Route Handlers

Handles the /import endpoint: capability gate, body decoding,
authorization, delegation to the engine and response encoding.
"""

import asyncio
from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, Header, Request, Response

from .. import __version__
from ..config import get_settings
from ..engine import Action, Engine, EngineError, NotAllowed, ResourceKind, RouteTarget, Session
from ..errors import ClientDisconnected, DecodeError, ImportFailed, PermissionDenied, RouteForbidden, UnsupportedFormat
from ..models import ErrorResponse, HealthResponse, ResponseFormat
from ..services import get_engine
from .dependencies import get_session
from .encoding import bytes_to_utf8, encode_response


logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Health check for load balancers."""
    engine = get_engine()
    _check_route(engine, RouteTarget.HEALTH)
    settings = get_settings()
    return HealthResponse(service=settings.service_name, version=__version__)


@router.post(
    "/import",
    tags=["Import"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        415: {"model": ErrorResponse},
    },
)
async def import_data(
    request: Request,
    accept: Optional[str] = Header(default=None),
    session: Session = Depends(get_session),
) -> Response:
    """
    Run a bulk import.

    The raw body is imported as UTF-8 text. The result is returned in the
    format named by the Accept header: application/json, application/cbor,
    application/pack, application/octet-stream (empty body) or
    application/vnd.import-api.native.
    """
    engine = get_engine()

    _check_route(engine, RouteTarget.IMPORT)

    try:
        text = bytes_to_utf8(await request.body())
    except DecodeError as e:
        logger.warning("import_body_invalid_utf8", error=str(e))
        raise

    resource = ResourceKind.ANY.on_level(session.level)
    try:
        engine.check_permission(session, Action.EDIT, resource)
    except NotAllowed as e:
        logger.warning("import_permission_denied", actor=session.actor, level=session.level.kind.value)
        raise PermissionDenied(str(e)) from e
    except EngineError as e:
        logger.error("import_permission_check_failed", actor=session.actor, error=str(e), error_type=type(e).__name__)
        raise ImportFailed(str(e)) from e

    result = await _run_import(request, engine, text, session)

    response_format = ResponseFormat.from_header(accept)
    if response_format is None:
        logger.warning("import_unsupported_format", accept=accept)
        raise UnsupportedFormat(f"Cannot respond with content type '{accept or ''}'")

    return encode_response(engine, response_format, result)


def _check_route(engine: Engine, route: RouteTarget) -> None:
    """Refuse the request if capabilities disable the route."""
    if not engine.allows_route(route):
        logger.warning("route_forbidden", route=str(route))
        raise RouteForbidden(str(route))


async def _wait_for_disconnect(request: Request) -> None:
    """Return once the client closes the connection."""
    while True:
        message = await request.receive()
        if message["type"] == "http.disconnect":
            return


async def _run_import(request: Request, engine: Engine, text: str, session: Session) -> Any:
    """
    Hand the text to the engine and wait for the result.

    The import is abandoned, not retried, if the client disconnects first.
    """
    logger.info("import_started", actor=session.actor, size=len(text))

    import_task = asyncio.ensure_future(engine.run_import(text, session))
    disconnect_task = asyncio.ensure_future(_wait_for_disconnect(request))
    try:
        done, _ = await asyncio.wait(
            {import_task, disconnect_task},
            return_when=asyncio.FIRST_COMPLETED,
        )
    finally:
        disconnect_task.cancel()
        if not import_task.done():
            import_task.cancel()

    if import_task not in done:
        logger.warning("import_abandoned", actor=session.actor)
        raise ClientDisconnected("Client disconnected before the import completed")

    try:
        result = import_task.result()
    except EngineError as e:
        logger.error("import_failed", actor=session.actor, error=str(e), error_type=type(e).__name__)
        raise ImportFailed(str(e)) from e

    logger.info("import_completed", actor=session.actor)
    return result
