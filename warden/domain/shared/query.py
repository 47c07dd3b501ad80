"""Queries read state; their handlers are gated like command handlers."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, ClassVar, Generic, TypeVar

from pydantic import BaseModel

from warden.domain.shared.handler import GatedHandlerMeta

if TYPE_CHECKING:
    from warden.domain.shared.authorization.gate import Gate


class Query(BaseModel): ...


class Result(BaseModel): ...


Q = TypeVar("Q", bound=Query)
R = TypeVar("R", bound=Result)


class QueryHandler(Generic[Q, R], metaclass=GatedHandlerMeta):
    """Base class for query handlers. Subclasses are automatically dataclasses.

    Declare __auth__ to enforce access before run():
        class MyHandler(QueryHandler[MyQuery, MyResult]):
            __auth__ = at_least(Role.VIEWER)
            actor: User
    """

    __auth__: ClassVar[Gate]

    @abstractmethod
    async def run(self, query: Q) -> R: ...
