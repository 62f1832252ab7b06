# =============================================================================
# Import API - Test Fakes
# =============================================================================
"""
Stand-ins for the external data engine and the sessions it checks.

``FakeEngine`` records every import it is asked to run and returns (or
raises) whatever the test sets.
"""

from datetime import datetime, timezone
from typing import Any, List, Optional, Tuple
from uuid import UUID

from pydantic import BaseModel

from import_api.engine import AuthLevel, Engine, LevelKind, Role, Session


# =============================================================================
# Fake Engine
# =============================================================================

class Person(BaseModel):
    """Record type returned by the fake engine."""
    id: UUID
    name: str
    created_at: datetime


SAMPLE_RESULT = [
    {
        "status": "OK",
        "result": [
            Person(
                id=UUID("0b8f6a4e-8a3c-4f5e-9a0e-5d8f2c1b7e11"),
                name="Ann",
                created_at=datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc),
            )
        ],
    }
]


class FakeEngine(Engine):
    """Engine that records imports instead of executing them."""

    def __init__(self, result: Any = None, error: Optional[Exception] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.result = result
        self.error = error
        self.calls: List[Tuple[str, Session]] = []

    async def run_import(self, text: str, session: Session) -> Any:
        self.calls.append((text, session))
        if self.error is not None:
            raise self.error
        return self.result


# =============================================================================
# Sessions
# =============================================================================

DATABASE_LEVEL = AuthLevel(kind=LevelKind.DATABASE, namespace="test", database="test")

EDITOR_SESSION = Session(level=DATABASE_LEVEL, roles=frozenset({Role.EDITOR}), actor="ann")
VIEWER_SESSION = Session(level=DATABASE_LEVEL, roles=frozenset({Role.VIEWER}), actor="bob")
ANONYMOUS_SESSION = Session.anonymous()
