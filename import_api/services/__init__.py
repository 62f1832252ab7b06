# =============================================================================
# Import API - Services Package
# =============================================================================
"""Service layer for external integrations."""

from .engine import get_engine, load_factory

__all__ = ["get_engine", "load_factory"]
