"""Commands change state; their handlers are gated by ``__auth__``."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, ClassVar, Generic, TypeVar

from pydantic import BaseModel

from warden.domain.shared.handler import GatedHandlerMeta

if TYPE_CHECKING:
    from warden.domain.shared.authorization.gate import Gate


class Command(BaseModel): ...


class Result(BaseModel): ...


C = TypeVar("C", bound=Command)
R = TypeVar("R", bound=Result)


class CommandHandler(Generic[C, R], metaclass=GatedHandlerMeta):
    """Base class for command handlers. Subclasses are automatically dataclasses.

    Declare __auth__ to enforce access before run():
        class MyHandler(CommandHandler[MyCmd, MyResult]):
            __auth__ = requires(Permission.USERS_EDIT)
            actor: User
    """

    __auth__: ClassVar[Gate]

    @abstractmethod
    async def run(self, cmd: C) -> R: ...
