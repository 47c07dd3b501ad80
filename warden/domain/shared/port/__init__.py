"""Base marker for driven ports (collaborator interfaces)."""

from typing import Protocol


class Port(Protocol):
    """Marker base for all ports implemented by infrastructure adapters."""
