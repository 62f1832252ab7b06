# =============================================================================
# Import API - Engine Loader
# =============================================================================
"""
Builds the process-wide engine handle from configuration.

The engine implementation lives outside this service. ``ENGINE_FACTORY``
names a callable as ``"package.module:callable"``; it is called once with
the configured capabilities and must return an ``Engine``.
"""

from functools import lru_cache
from importlib import import_module

import structlog

from ..config import get_settings
from ..engine import Capabilities, Engine
from ..errors import EngineUnavailable


# Configure structured logger
logger = structlog.get_logger(__name__)


def load_factory(path: str):
    """
    Resolve a ``"module:attribute"`` path to the object it names.

    Raises:
        EngineUnavailable: If the path is malformed or cannot be imported
    """
    module_name, sep, attribute = path.partition(":")
    if not sep or not module_name or not attribute:
        raise EngineUnavailable(f"ENGINE_FACTORY must look like 'module:callable', got '{path}'")

    try:
        module = import_module(module_name)
    except ImportError as e:
        logger.error("engine_factory_import_failed", path=path, error=str(e))
        raise EngineUnavailable(f"Cannot import engine module '{module_name}'") from e

    try:
        return getattr(module, attribute)
    except AttributeError as e:
        raise EngineUnavailable(f"Module '{module_name}' has no attribute '{attribute}'") from e


@lru_cache
def get_engine() -> Engine:
    """
    Get the cached engine handle.

    Uses LRU cache so every request shares one engine instance.

    Returns:
        Engine: Configured engine

    Raises:
        EngineUnavailable: If no usable engine factory is configured
    """
    settings = get_settings()
    if not settings.engine_factory:
        raise EngineUnavailable("No engine is configured; set ENGINE_FACTORY")

    try:
        capabilities = Capabilities.from_strings(
            settings.allow_http_routes,
            settings.deny_http_routes,
        )
    except ValueError as e:
        raise EngineUnavailable(f"Invalid route capabilities: {e}") from e

    factory = load_factory(settings.engine_factory)
    engine = factory(capabilities=capabilities, auth_enabled=settings.auth_enabled)
    if not isinstance(engine, Engine):
        raise EngineUnavailable(
            f"ENGINE_FACTORY returned {type(engine).__name__}, expected an Engine"
        )

    logger.info(
        "engine_initialized",
        engine=type(engine).__name__,
        auth_enabled=settings.auth_enabled,
    )
    return engine
