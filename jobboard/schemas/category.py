"""
Pydantic schemas for category endpoints.
"""
from typing import Optional
from pydantic import Field

from jobboard.schemas.common import CamelModel


class CategoryCreate(CamelModel):
    type: Optional[str] = Field(None, description="Unique category name", max_length=100)


class CategoryUpdate(CamelModel):
    type: Optional[str] = Field(None, description="New category name", max_length=100)
    is_visible: Optional[bool] = Field(None, description="Visibility; omitted means visible")


class CategoryResponse(CamelModel):
    id: int = Field(..., alias="_id")
    type: str
    usage_count: int
    is_visible: bool


class CategoryRef(CamelModel):
    id: int = Field(..., alias="_id")
    type: str
