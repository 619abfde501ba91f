from . import menu

__all__ = [
    "menu",
]
