import math
from typing import Generic, List, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    pages: int

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> "Pagination":
        return cls(total=total, page=page, limit=limit, pages=math.ceil(total / limit))


class Page(BaseModel, Generic[T]):
    data: List[T]
    pagination: Pagination


class ListResponse(BaseModel, Generic[T]):
    data: List[T]


class SuccessResponse(BaseModel):
    success: bool = True
