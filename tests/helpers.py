"""Test helpers: chainable scope targets and request contexts."""

from __future__ import annotations

from typing import Any


class Relation:
    """Immutable stand-in for a query object.

    Every scope call returns a new Relation whose ``calls`` extends the
    receiver's, so the chain order is visible on the final target.
    """

    def __init__(self, calls: tuple[tuple[str, tuple[Any, ...]], ...] = ()) -> None:
        self.calls = calls

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)

        def scope(*args: Any) -> Relation:
            return Relation(self.calls + ((name, args),))

        return scope

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


class FakeRequest:
    """Request context with an action name and arbitrary attributes."""

    def __init__(self, action_name: str = "index", **attributes: Any) -> None:
        self.action_name = action_name
        for key, value in attributes.items():
            setattr(self, key, value)
