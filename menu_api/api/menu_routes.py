from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from menu_api.crud import menu as menu_crud
from menu_api.db import get_db
from menu_api.schemas import (
    MenuCreate,
    MenuUpdate,
    MenuRead,
    MenuPage,
    Pagination,
    MenuResponse,
    MenuTreeResponse,
    MenuForestResponse,
    MenuPageResponse,
    MessageResponse,
)

router = APIRouter(prefix="/menus", tags=["menus"])


# ----- Tree of all roots
@router.get("/tree", response_model=MenuForestResponse)
async def get_tree(db: AsyncSession = Depends(get_db)):
    data = await menu_crud.get_menu_tree(db)
    return MenuForestResponse(data=data)


# ----- Flat, paginated list
@router.get("", response_model=MenuPageResponse)
async def list_menus(
    page: Optional[int] = Query(1),
    limit: Optional[int] = Query(None),
    search: Optional[str] = Query(None),
    sort_by: Literal["name", "order", "createdAt", "updatedAt", "slug", "id"] = Query("createdAt", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("asc", alias="sortOrder"),
    db: AsyncSession = Depends(get_db),
):
    items, pagination = await menu_crud.list_menus(db, page, limit, search, sort_by, sort_order)
    data = MenuPage(
        items=items,
        pagination=Pagination(**pagination),
    )
    return MenuPageResponse(data=data)


# ----- Single menu, or its subtree with ?tree=true
@router.get("/{menu_id}", response_model=None)
async def get_menu(
    menu_id: int,
    tree: bool = Query(False),
    db: AsyncSession = Depends(get_db),
):
    if tree:
        return MenuTreeResponse(data=await menu_crud.get_menu_subtree(db, menu_id))
    menu = await menu_crud.get_menu(db, menu_id)
    return MenuResponse(data=MenuRead.model_validate(menu))


@router.post("", response_model=MenuResponse, status_code=201)
async def create_menu(payload: MenuCreate, db: AsyncSession = Depends(get_db)):
    menu = await menu_crud.create_menu(db, payload)
    return MenuResponse(data=MenuRead.model_validate(menu), message="Menu created.")


@router.patch("/{menu_id}", response_model=MenuResponse)
async def update_menu(menu_id: int, payload: MenuUpdate, db: AsyncSession = Depends(get_db)):
    menu = await menu_crud.update_menu(db, menu_id, payload)
    return MenuResponse(data=MenuRead.model_validate(menu), message="Menu updated.")


@router.delete("/{menu_id}", response_model=MessageResponse)
async def delete_menu(menu_id: int, db: AsyncSession = Depends(get_db)):
    await menu_crud.delete_menu(db, menu_id)
    return MessageResponse(message="Menu removed.")
