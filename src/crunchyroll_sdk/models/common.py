from typing import Any, Generic, TypeVar

from pydantic import Field

from crunchyroll_sdk.models.base import CrunchyModel, ExecutorModel

T = TypeVar("T")


class BulkResult(ExecutorModel, Generic[T]):
    """A page of items plus the total number of items available.

    ``total`` sizes the result set; it does not bound ``len(items)``.
    """

    executor_fields = ("items",)

    items: list[T] = []
    total: int = 0


class CrappyBulkResult(ExecutorModel, Generic[T]):
    """Like :class:`BulkResult` for endpoints that omit ``total``."""

    executor_fields = ("items",)

    items: list[T] = []


class V2BulkResult(ExecutorModel, Generic[T]):
    """Envelope used by the newer ``/content/v2`` endpoints."""

    executor_fields = ("data",)

    data: list[T] = []
    total: int = 0
    meta: dict[str, Any] = {}


class Image(CrunchyModel):
    source: str = ""
    image_type: str = Field("", alias="type")
    height: int = 0
    width: int = 0
