# =============================================================================
# Import API - Engine Package
# =============================================================================
"""Contract and shared types for the external data engine."""

from .base import Engine, EngineError, NotAllowed
from .capabilities import Capabilities, RouteTarget, Targets
from .iam import Action, AuthLevel, LevelKind, Resource, ResourceKind, Role, Session

__all__ = [
    "Action",
    "AuthLevel",
    "Capabilities",
    "Engine",
    "EngineError",
    "LevelKind",
    "NotAllowed",
    "Resource",
    "ResourceKind",
    "Role",
    "RouteTarget",
    "Session",
    "Targets",
]
