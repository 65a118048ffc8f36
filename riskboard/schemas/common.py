from math import ceil
from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class PageMeta(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PageMeta":
        return cls(page=page, limit=limit, total=total, total_pages=ceil(total / limit) if limit else 0)


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T | None = None
    message: str | None = None
    pagination: PageMeta | None = None


class ErrorOut(BaseModel):
    success: bool = False
    error: str
    message: str
    details: dict | list | None = None
    traceback: str | None = None


def ok(data=None, message: str | None = None, pagination: PageMeta | None = None) -> dict:
    out = {"success": True, "data": data}
    if message is not None:
        out["message"] = message
    if pagination is not None:
        out["pagination"] = pagination
    return out
