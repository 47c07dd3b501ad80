"""Metaclass shared by CommandHandler and QueryHandler.

Concrete handlers are dataclasses like services, and their ``run`` is
wrapped to evaluate the class ``__auth__`` gate against ``self.actor`` first.
"""

from abc import ABCMeta
from collections.abc import Callable, Coroutine
from functools import wraps
from typing import Any, dataclass_transform

from warden.domain.shared.service import AutoDataclassMeta

_Run = Callable[..., Coroutine[Any, Any, Any]]


def _gated(run: _Run) -> _Run:
    @wraps(run)
    async def gated_run(self: Any, request: Any) -> Any:
        from warden.domain.shared.authorization.gate import enforce

        enforce(self, getattr(type(self), "__auth__", None))
        return await run(self, request)

    return gated_run


@dataclass_transform()
class GatedHandlerMeta(AutoDataclassMeta, ABCMeta):
    def __new__(mcs, name: str, bases: tuple[type, ...], namespace: dict[str, Any]):
        cls = super().__new__(mcs, name, bases, namespace)
        # The abstract bases themselves are left alone
        if any(isinstance(b, GatedHandlerMeta) for b in bases):
            run = cls.__dict__.get("run")
            if run is not None:
                cls.run = _gated(run)
        return cls
