# =============================================================================
# Import API - Identity & Access Types
# =============================================================================
"""
Session and permission vocabulary shared with the data engine.

A ``Session`` is produced by the upstream authentication layer and is
read-only here. The permission check is phrased as an ``Action`` on a
``Resource``; the engine decides whether the session may perform it.
"""

from enum import Enum
from typing import FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field


class LevelKind(str, Enum):
    """Authorization levels, from anonymous up to the whole server."""
    NO = "no"
    ROOT = "root"
    NAMESPACE = "namespace"
    DATABASE = "database"
    RECORD = "record"


class Role(str, Enum):
    """Roles a session can hold at its level."""
    VIEWER = "viewer"
    EDITOR = "editor"
    OWNER = "owner"


class Action(str, Enum):
    """Kinds of action checked against a session."""
    VIEW = "view"
    EDIT = "edit"


class AuthLevel(BaseModel):
    """
    The scope a session is authenticated at.

    Attributes:
        kind: Level of the session
        namespace: Namespace name for namespace, database and record levels
        database: Database name for database and record levels
    """

    model_config = ConfigDict(frozen=True)

    kind: LevelKind = LevelKind.NO
    namespace: Optional[str] = None
    database: Optional[str] = None

    def contains(self, other: "AuthLevel") -> bool:
        """Whether ``other`` lies within this level's scope."""
        if self.kind is LevelKind.NO:
            return False
        if self.kind is LevelKind.ROOT:
            return True
        if self.kind is LevelKind.NAMESPACE:
            return (
                other.kind in (LevelKind.NAMESPACE, LevelKind.DATABASE, LevelKind.RECORD)
                and other.namespace == self.namespace
            )
        if self.kind is LevelKind.DATABASE:
            return (
                other.kind in (LevelKind.DATABASE, LevelKind.RECORD)
                and other.namespace == self.namespace
                and other.database == self.database
            )
        return other == self


class ResourceKind(str, Enum):
    """Kinds of resource a permission can be checked on."""
    ANY = "any"

    def on_level(self, level: AuthLevel) -> "Resource":
        """Bind this resource kind to an authorization level."""
        return Resource(kind=self, level=level)


class Resource(BaseModel):
    """A resource kind scoped to an authorization level."""

    model_config = ConfigDict(frozen=True)

    kind: ResourceKind
    level: AuthLevel


class Session(BaseModel):
    """
    Authenticated caller identity.

    Attributes:
        level: Scope the caller authenticated at
        roles: Roles granted at that scope
        actor: Identifier of the authenticated user, if any
    """

    model_config = ConfigDict(frozen=True)

    level: AuthLevel = Field(default_factory=AuthLevel)
    roles: FrozenSet[Role] = frozenset()
    actor: Optional[str] = None

    @classmethod
    def anonymous(cls) -> "Session":
        """Session for a caller that has not authenticated."""
        return cls()

    @property
    def is_anonymous(self) -> bool:
        return self.level.kind is LevelKind.NO
