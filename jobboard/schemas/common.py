"""
Shared schema pieces: camelCase wire format and pagination metadata.
"""
import math
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for every request/response body; fields travel as camelCase."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class Pagination(CamelModel):
    total: int = Field(..., description="Total number of matching items")
    page: int = Field(..., description="Current page number")
    limit: int = Field(..., description="Items per page")
    total_pages: int = Field(..., description="ceil(total / limit)")


def build_pagination(total: int, page: int, limit: int) -> dict:
    return Pagination(
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit) if limit else 0,
    ).model_dump(by_alias=True)


def dump(model: BaseModel) -> dict:
    """Serialize a response schema the way it goes on the wire."""
    return model.model_dump(mode="json", by_alias=True)
