from .menu import (
    MenuCreate,
    MenuUpdate,
    MenuRead,
    MenuTreeRead,
    MenuListItem,
    Pagination,
    MenuPage,
    MenuResponse,
    MenuTreeResponse,
    MenuForestResponse,
    MenuPageResponse,
    MessageResponse,
)

__all__ = [
    "MenuCreate",
    "MenuUpdate",
    "MenuRead",
    "MenuTreeRead",
    "MenuListItem",
    "Pagination",
    "MenuPage",
    "MenuResponse",
    "MenuTreeResponse",
    "MenuForestResponse",
    "MenuPageResponse",
    "MessageResponse",
]
