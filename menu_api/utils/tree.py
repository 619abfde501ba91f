# menu_api/utils/tree.py
from typing import Dict, Iterable, List, Optional

from menu_api.core.exceptions import MenuConflict
from menu_api.models.menu import PATH_SEPARATOR
from menu_api.schemas.menu import MenuRead, MenuTreeRead


def build_path(menu_id: int, parent_path: Optional[str] = None) -> str:
    return f"{parent_path or ''}{menu_id}{PATH_SEPARATOR}"


def rebase_path(path: str, old_prefix: str, new_prefix: str) -> str:
    """Swap the ``old_prefix`` of a descendant path for ``new_prefix`` after a move."""
    if not path.startswith(old_prefix):
        raise ValueError(f"path {path!r} is not under {old_prefix!r}")
    return new_prefix + path[len(old_prefix):]


def validate_reparent(node_id: int, new_parent_id: int, descendant_ids: Iterable[int]) -> None:
    if new_parent_id == node_id:
        raise MenuConflict("Cannot set parent to itself")
    if new_parent_id in set(descendant_ids):
        raise MenuConflict("Cannot move a node into its descendant")


def validate_delete(node, child_count: int) -> None:
    if child_count > 0:
        raise MenuConflict(f"Remove/move children first ({child_count} child menu(s) under '{node.name}')")


def build_tree(nodes) -> List[MenuTreeRead]:
    """
    Assemble flat Menu rows into nested MenuTreeRead nodes.

    Rows must be ordered parent-before-child (ordering by mpath does this).
    Any row whose parent is not part of ``nodes`` becomes a root of the result,
    so passing a single subtree returns a one-element list.
    """
    by_id: Dict[int, MenuTreeRead] = {}
    roots: List[MenuTreeRead] = []

    for node in nodes:
        item = MenuTreeRead(**MenuRead.model_validate(node).model_dump(), children=[])
        by_id[item.id] = item
        parent = by_id.get(item.parent_id) if item.parent_id is not None else None
        if parent is None:
            roots.append(item)
        else:
            parent.children.append(item)

    def _sort(items: List[MenuTreeRead]):
        items.sort(key=lambda m: (m.order, m.id))
        for m in items:
            _sort(m.children)

    _sort(roots)
    return roots
