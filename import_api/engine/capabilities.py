# =============================================================================
# Import API - Route Capabilities
# =============================================================================
"""
Configuration-driven allow/deny rules for HTTP routes.

A route may be used when it is in the allow set and not in the deny set.
Each set is written as ``all``, ``none`` or a comma-separated list of
route names, e.g. ``ALLOW_HTTP_ROUTES=import,health``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet


class RouteTarget(str, Enum):
    """HTTP routes known to the capability gate."""
    IMPORT = "import"
    HEALTH = "health"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Targets:
    """A set of route targets: everything, nothing, or an explicit list."""

    all: bool = False
    items: FrozenSet[RouteTarget] = field(default_factory=frozenset)

    @classmethod
    def parse(cls, value: str) -> "Targets":
        """
        Parse a targets expression.

        Raises:
            ValueError: If a listed name is not a known route
        """
        value = value.strip().lower()
        if value in ("all", "*"):
            return cls(all=True)
        if value in ("", "none"):
            return cls()
        names = [name.strip() for name in value.split(",") if name.strip()]
        return cls(items=frozenset(RouteTarget(name) for name in names))

    def matches(self, target: RouteTarget) -> bool:
        return self.all or target in self.items


@dataclass(frozen=True)
class Capabilities:
    """Allow and deny rules for HTTP routes."""

    allow_http_routes: Targets = field(default_factory=lambda: Targets(all=True))
    deny_http_routes: Targets = field(default_factory=Targets)

    @classmethod
    def from_strings(cls, allow: str, deny: str) -> "Capabilities":
        return cls(
            allow_http_routes=Targets.parse(allow),
            deny_http_routes=Targets.parse(deny),
        )

    def allows_http_route(self, target: RouteTarget) -> bool:
        return self.allow_http_routes.matches(target) and not self.deny_http_routes.matches(target)
