from typing import Any, Protocol

from sqlchain.builder._state import BuilderState

__all__ = ("BuilderProtocol",)


class BuilderProtocol(Protocol):
    _state: BuilderState

    def escape(self, value: Any) -> str: ...

    def qualify_table(self, name: str) -> str: ...
