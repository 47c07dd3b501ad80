"""Dishka scopes used by every Warden provider."""

from dishka import BaseScope, new_scope


class Scope(BaseScope):  # type: ignore[misc]  # BaseScope is designed to be subclassed
    """APP holds the config and the database engine for the process.

    UOW is one CLI command (or one embedding caller's request): a session,
    the stores bound to it, the acting user and the handlers.
    """

    APP = new_scope("APP")
    UOW = new_scope("UOW")
