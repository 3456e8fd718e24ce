"""Mixin exposing scope registration and application on host classes."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any, ClassVar

from hasscope.core.scope.applier import ScopeApplier
from hasscope.core.scope.registry import ScopeRegistry
from hasscope.models.scope import ApplicationResult, ScopeConfig

default_registry = ScopeRegistry()


class HasScope:
    """Declare scopes on a class and apply them per request.

    Instances are expected to expose ``params`` (a mapping) and
    ``action_name``. The instance itself is the context given to
    conditions, computed defaults and handlers.

        class GraduationsController(HasScope):
            def index(self):
                return self.apply_scopes(Graduation.query).all()

        GraduationsController.has_scope("featured", type="boolean", only=["index"])
        GraduationsController.has_scope("by_degree", only=["index"])

        @GraduationsController.scope("category")
        def by_category(controller, scope, value):
            return scope if value == "all" else scope.by_category(value)

    Each subclass starts from a snapshot of its parent's scopes taken when
    the subclass is defined; later registrations on either side stay local.
    """

    scope_registry: ClassVar[ScopeRegistry] = default_registry

    params: Mapping[str, Any]
    action_name: str | None = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.scope_registry.inherit(cls)

    @classmethod
    def has_scope(cls, *names: str, **options: Any) -> list[ScopeConfig]:
        """Register scopes on this class; see ``ScopeOptions`` for the options."""
        return cls.scope_registry.register(cls, names, **options)

    @classmethod
    def scope(
        cls, *names: str, **options: Any
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Register the decorated function as the handler of one or more scopes.

        Without names, the function name is used as the scope name.
        """

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            cls.scope_registry.register(cls, names or (func.__name__,), handler=func, **options)
            return func

        return decorator

    @classmethod
    def scopes_configuration(cls) -> Mapping[str, ScopeConfig]:
        return cls.scope_registry.configs(cls)

    def apply_scopes(self, target: Any, params: Mapping[str, Any] | None = None) -> Any:
        """Apply this class's scopes to ``target`` using the request params."""
        applier = ScopeApplier(self.scopes_configuration())
        target = applier.apply(
            target,
            self.params if params is None else params,
            action=self.action_name,
            context=self,
        )
        self._scope_result = applier.result
        return target

    def current_scopes(self, keys: Iterable[str] = ()) -> dict[str, Any]:
        """Return the scopes applied by the last ``apply_scopes`` call."""
        result = getattr(self, "_scope_result", None)
        if result is None:
            result = self._scope_result = ApplicationResult()
        return result.current_scopes(keys)
