# backend/app/schemas/common.py

import math
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 10
# keeps (page - 1) * page_size inside a signed 64-bit OFFSET
MAX_PAGE = (2 ** 63 - 1) // MAX_PAGE_SIZE


class CamelModel(BaseModel):
    """Base for everything exposed over HTTP: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class Pagination(CamelModel):
    total: int
    page: int
    page_size: int
    total_pages: int

    @classmethod
    def build(cls, total: int, page: int, page_size: int) -> "Pagination":
        return cls(
            total=total,
            page=page,
            page_size=page_size,
            total_pages=math.ceil(total / page_size),
        )


class PageParams(BaseModel):
    page: int = Field(1, ge=1, le=MAX_PAGE)
    page_size: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


class ApiResponse(CamelModel, Generic[DataT]):
    status: int = 1
    data: Optional[DataT] = None
    message: str = "Success"
