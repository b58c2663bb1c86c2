"""Base models and the executor injection protocol.

The wire format never carries connection or session state, so decoding is a
two step process: pydantic builds a context-free value, then
:func:`bind_executor` walks it and attaches the shared
:class:`~crunchyroll_sdk.executor.Executor` to everything that wants one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict, PrivateAttr

if TYPE_CHECKING:
    from crunchyroll_sdk.executor import Executor


class CrunchyModel(BaseModel):
    """Base for every wire model. Unknown fields are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def set_executor(self, executor: Executor) -> None:
        """Attach an executor. Models without follow-up requests ignore it."""

    def get_executor(self) -> Executor | None:
        return None


class ExecutorModel(CrunchyModel):
    """A model that keeps a reference to the executor it was decoded with.

    Subclasses list nested fields that need the executor as well in
    ``executor_fields``.
    """

    executor_fields: ClassVar[tuple[str, ...]] = ()

    _executor: Any = PrivateAttr(default=None)

    def set_executor(self, executor: Executor) -> None:
        self._executor = executor
        for name in self.executor_fields:
            bind_executor(getattr(self, name), executor)

    def get_executor(self) -> Executor | None:
        return self._executor


def bind_executor(value: Any, executor: Executor) -> None:
    """Inject ``executor`` into ``value`` and any containers it is made of."""
    set_executor = getattr(value, "set_executor", None)
    if callable(set_executor):
        set_executor(executor)
    elif isinstance(value, (list, tuple)):
        for item in value:
            bind_executor(item, executor)
    elif isinstance(value, dict):
        for item in value.values():
            bind_executor(item, executor)
