from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class MenuCreate(CamelModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=150)
    slug: Optional[str] = Field(None, max_length=180)
    order: Optional[int] = Field(None, ge=0)
    is_active: bool = True
    parent_id: Optional[int] = Field(None, ge=1)


class MenuUpdate(CamelModel):
    """All fields optional. Presence matters: ``parentId: null`` detaches, a sent ``slug`` re-derives."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, max_length=150)
    slug: Optional[str] = Field(None, max_length=180)
    order: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None
    parent_id: Optional[int] = Field(None, ge=1)


class MenuRead(CamelModel):
    id: int
    uid: str
    name: str
    slug: str
    order: int
    is_active: bool
    parent_id: Optional[int] = None
    depth: int = 0
    created_at: datetime
    updated_at: datetime


class MenuTreeRead(MenuRead):
    children: List["MenuTreeRead"] = []


MenuTreeRead.model_rebuild()


class MenuListItem(MenuRead):
    children_count: int = 0


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class MenuPage(CamelModel):
    items: List[MenuListItem]
    pagination: Pagination


# ----- Response envelopes
class MenuResponse(CamelModel):
    data: MenuRead
    success: bool = True
    message: Optional[str] = None


class MenuTreeResponse(CamelModel):
    data: MenuTreeRead
    success: bool = True


class MenuForestResponse(CamelModel):
    data: List[MenuTreeRead]
    success: bool = True


class MenuPageResponse(CamelModel):
    data: MenuPage
    success: bool = True


class MessageResponse(CamelModel):
    success: bool = True
    message: str
