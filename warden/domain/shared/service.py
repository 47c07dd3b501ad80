"""Base class for domain services."""

from dataclasses import dataclass
from typing import Any, dataclass_transform


@dataclass_transform()
class AutoDataclassMeta(type):
    """Makes every subclass of the declaring class a dataclass.

    DI builds such classes from their field annotations; tests pass the
    fields as keyword arguments.
    """

    def __new__(mcs, name: str, bases: tuple[type, ...], namespace: dict[str, Any]):
        cls = super().__new__(mcs, name, bases, namespace)
        if any(isinstance(b, AutoDataclassMeta) for b in bases):
            cls = dataclass(cls)
        return cls


class Service(metaclass=AutoDataclassMeta):
    """Collaborators are declared as fields, ports prefixed with ``_``."""
