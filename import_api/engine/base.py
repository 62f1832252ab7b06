# =============================================================================
# Import API - Engine Contract
# =============================================================================
"""
Contract between the import endpoint and the external data engine.

The endpoint only ever talks to the engine through this class: it asks
whether a route is enabled, asks whether the session may edit, hands over
the import text, and uses the engine's own hooks to turn the result into
something a client can read. Concrete engines subclass ``Engine`` and
implement ``run_import``; the other operations have working defaults.
"""

import pickle
from abc import ABC, abstractmethod
from typing import Any, Optional

from fastapi.encoders import jsonable_encoder

from .capabilities import Capabilities, RouteTarget
from .iam import Action, Resource, Role, Session


class EngineError(Exception):
    """Failure reported by the engine while executing an import."""
    pass


class NotAllowed(EngineError):
    """The session is not allowed to perform the requested action."""

    def __init__(self, actor: Optional[str], action: Action, resource: Resource) -> None:
        self.actor = actor
        self.action = action
        self.resource = resource
        who = actor or "anonymous"
        super().__init__(
            f"Not enough permissions to perform this action: "
            f"{who} may not {action.value} {resource.kind.value} on {resource.level.kind.value} level"
        )


class Engine(ABC):
    """
    Handle to the data engine.

    Instances are shared by all in-flight requests, so implementations
    must be safe to call concurrently from many tasks.

    Attributes:
        capabilities: Route allow/deny rules
        auth_enabled: Whether anonymous sessions are refused
    """

    def __init__(
        self,
        capabilities: Optional[Capabilities] = None,
        auth_enabled: bool = True,
    ) -> None:
        self.capabilities = capabilities or Capabilities()
        self.auth_enabled = auth_enabled

    def allows_route(self, route: RouteTarget) -> bool:
        """Whether the capabilities enable the given HTTP route."""
        return self.capabilities.allows_http_route(route)

    def check_permission(self, session: Session, action: Action, resource: Resource) -> None:
        """
        Check that ``session`` may perform ``action`` on ``resource``.

        Anonymous sessions are refused unless authentication is disabled.
        Otherwise the resource must sit within the session's level, and
        editing needs the editor or owner role.

        Raises:
            NotAllowed: If the action is not permitted
        """
        if session.is_anonymous:
            if not self.auth_enabled:
                return
            raise NotAllowed(session.actor, action, resource)

        if not session.level.contains(resource.level):
            raise NotAllowed(session.actor, action, resource)

        if action is Action.EDIT and not session.roles & {Role.EDITOR, Role.OWNER}:
            raise NotAllowed(session.actor, action, resource)

        if action is Action.VIEW and not session.roles:
            raise NotAllowed(session.actor, action, resource)

    @abstractmethod
    async def run_import(self, text: str, session: Session) -> Any:
        """
        Execute a bulk import.

        Args:
            text: The decoded import payload
            session: The caller's session

        Returns:
            The engine's import result

        Raises:
            EngineError: If the import fails
        """

    def simplify(self, result: Any) -> Any:
        """Collapse a result into plain JSON-compatible values."""
        return jsonable_encoder(result)

    def dump_native(self, result: Any) -> bytes:
        """Serialize a result without any loss for same-ecosystem clients."""
        return pickle.dumps(result, protocol=pickle.HIGHEST_PROTOCOL)
