import logging
import math
from contextlib import asynccontextmanager

from sqlalchemy import func, or_, select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from menu_api.core.config import settings
from menu_api.core.exceptions import MenuConflict, MenuNotFound, MenuValidationError
from menu_api.models.menu import Menu
from menu_api.schemas.menu import MenuCreate, MenuListItem, MenuRead, MenuUpdate
from menu_api.utils.slug import SLUG_MAX_LENGTH, is_empty_or_hyphens, normalize_slug, random_slug, truncate_slug
from menu_api.utils.tree import build_path, build_tree, rebase_path, validate_delete, validate_reparent

log = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"
ROOT_LOCK_KEY = 0

SORT_COLUMNS = {
    "name": Menu.name,
    "order": Menu.order,
    "createdAt": Menu.created_at,
    "updatedAt": Menu.updated_at,
    "slug": Menu.slug,
    "id": Menu.id,
}


# ----- Helpers

def is_unique_violation(exc: IntegrityError) -> bool:
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code:
        return code == UNIQUE_VIOLATION
    # sqlite has no SQLSTATE
    return "UNIQUE constraint failed" in str(orig)


async def lock_sibling_group(db: AsyncSession, parent_id):
    """Transaction-scoped advisory lock serializing order assignment per parent (0 = roots)."""
    key = parent_id if parent_id is not None else ROOT_LOCK_KEY
    if db.get_bind().dialect.name != "postgresql":
        return
    log.debug("advisory lock: key=%s", key)
    await db.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": key})


def _slug_base(value) -> str:
    return truncate_slug(normalize_slug(value)) or random_slug()


@asynccontextmanager
async def transaction(db: AsyncSession, action: str, ref):
    """Commit on success, roll back on any failure; unique-key violations become MenuConflict."""
    try:
        yield
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        if is_unique_violation(exc):
            log.warning("%s conflict: ref=%s error=%s", action, ref, exc.orig)
            raise MenuConflict("Duplicate slug or order for this parent") from exc
        raise
    except Exception:
        await db.rollback()
        raise


# ----- Lookups

async def get_menu(db: AsyncSession, menu_id: int) -> Menu:
    menu = await db.get(Menu, menu_id)
    if not menu:
        raise MenuNotFound("Menu not found")
    return menu


async def slug_exists(db: AsyncSession, slug: str, exclude_id=None) -> bool:
    query = select(Menu.id).where(Menu.slug == slug)
    if exclude_id is not None:
        query = query.where(Menu.id != exclude_id)
    result = await db.execute(query.limit(1))
    return result.scalar_one_or_none() is not None


async def name_exists(db: AsyncSession, name: str, exclude_id=None) -> bool:
    query = select(Menu.id).where(Menu.name == name)
    if exclude_id is not None:
        query = query.where(Menu.id != exclude_id)
    result = await db.execute(query.limit(1))
    return result.scalar_one_or_none() is not None


async def resolve_unique_slug(db: AsyncSession, base: str, exclude_id=None) -> str:
    """
    Return ``base`` if free, else the first free ``base-2``, ``base-3``, ...

    The base is shortened as needed so every candidate fits the slug column.
    """
    candidate = truncate_slug(base)
    suffix = 2
    while await slug_exists(db, candidate, exclude_id):
        tail = f"-{suffix}"
        candidate = truncate_slug(base, SLUG_MAX_LENGTH - len(tail)) + tail
        suffix += 1
    return candidate


async def next_order(db: AsyncSession, parent_id) -> int:
    """Next sibling position under ``parent_id`` (None = roots). First sibling gets 1."""
    query = select(func.coalesce(func.max(Menu.order), 0))
    if parent_id is None:
        query = query.where(Menu.parent_id.is_(None))
    else:
        query = query.where(Menu.parent_id == parent_id)
    result = await db.execute(query)
    return int(result.scalar_one()) + 1


async def count_children(db: AsyncSession, menu_id: int) -> int:
    result = await db.execute(select(func.count(Menu.id)).where(Menu.parent_id == menu_id))
    return result.scalar_one()


async def count_children_by_parent(db: AsyncSession, parent_ids):
    if not parent_ids:
        return {}
    result = await db.execute(
        select(Menu.parent_id, func.count(Menu.id))
        .where(Menu.parent_id.in_(parent_ids))
        .group_by(Menu.parent_id)
    )
    return {parent_id: cnt for parent_id, cnt in result.all()}


async def get_descendants(db: AsyncSession, menu: Menu):
    result = await db.execute(
        select(Menu)
        .where(Menu.mpath.like(f"{menu.mpath}%"), Menu.id != menu.id)
        .order_by(Menu.mpath)
    )
    return result.scalars().all()


async def get_descendant_ids(db: AsyncSession, menu: Menu):
    result = await db.execute(
        select(Menu.id).where(Menu.mpath.like(f"{menu.mpath}%"), Menu.id != menu.id)
    )
    return set(result.scalars().all())


# ----- Queries

async def list_menus(db: AsyncSession, page=1, limit=None, search=None, sort_by="createdAt", sort_order="asc"):
    page = max(int(page or 1), 1)
    limit = int(limit or 0)
    if limit < 1:
        limit = settings.default_page_size
    limit = min(limit, settings.max_page_size)

    filters = []
    if search:
        pattern = f"%{search}%"
        filters.append(or_(Menu.name.ilike(pattern), Menu.slug.ilike(pattern)))

    column = SORT_COLUMNS.get(sort_by, Menu.created_at)
    ordering = column.desc() if sort_order == "desc" else column.asc()
    tiebreak = Menu.id.desc() if sort_order == "desc" else Menu.id.asc()

    total = (await db.execute(select(func.count(Menu.id)).where(*filters))).scalar_one()
    result = await db.execute(
        select(Menu)
        .where(*filters)
        .order_by(ordering, tiebreak)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    rows = result.scalars().all()
    child_counts = await count_children_by_parent(db, [m.id for m in rows])
    items = [
        MenuListItem(**MenuRead.model_validate(m).model_dump(), children_count=child_counts.get(m.id, 0))
        for m in rows
    ]

    return items, {
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": math.ceil(total / limit),
    }


async def get_menu_tree(db: AsyncSession):
    result = await db.execute(select(Menu).order_by(Menu.mpath))
    return build_tree(result.scalars().all())


async def get_menu_subtree(db: AsyncSession, menu_id: int):
    menu = await get_menu(db, menu_id)
    descendants = await get_descendants(db, menu)
    return build_tree([menu, *descendants])[0]


# ----- Mutations

async def create_menu(db: AsyncSession, payload: MenuCreate) -> Menu:
    name = payload.name.strip()
    async with transaction(db, "create", name):
        if not name:
            raise MenuValidationError("Menu name must not be empty")
        if await name_exists(db, name):
            raise MenuConflict("Menu name already exists")

        source = name if is_empty_or_hyphens(payload.slug) else payload.slug
        slug = await resolve_unique_slug(db, _slug_base(source))

        parent = None
        if payload.parent_id is not None:
            parent = await db.get(Menu, payload.parent_id)
            if not parent:
                raise MenuNotFound("Parent not found")

        parent_id = parent.id if parent else None
        await lock_sibling_group(db, parent_id)
        order = payload.order if payload.order is not None else await next_order(db, parent_id)

        menu = Menu(
            name=name,
            slug=slug,
            order=order,
            is_active=payload.is_active,
            parent_id=parent_id,
        )
        db.add(menu)
        await db.flush()
        menu.mpath = build_path(menu.id, parent.mpath if parent else None)

    await db.refresh(menu)
    log.info("create: menu=%s slug=%s parent=%s order=%s", menu.id, menu.slug, menu.parent_id, menu.order)
    return menu


async def update_menu(db: AsyncSession, menu_id: int, payload: MenuUpdate) -> Menu:
    fields = payload.model_fields_set
    async with transaction(db, "update", menu_id):
        menu = await get_menu(db, menu_id)

        name_changed = False
        if payload.name is not None:
            name = payload.name.strip()
            if name and name != menu.name:
                if await name_exists(db, name, exclude_id=menu.id):
                    raise MenuConflict("Menu name already exists")
                menu.name = name
                name_changed = True

        # an explicitly sent slug (even "" or null) re-derives; otherwise only a rename does
        if "slug" in fields or name_changed:
            source = menu.name if is_empty_or_hyphens(payload.slug) else payload.slug
            base = _slug_base(source)
            if base != menu.slug:
                menu.slug = await resolve_unique_slug(db, base, exclude_id=menu.id)

        if "parent_id" in fields and payload.parent_id != menu.parent_id:
            new_parent = None
            if payload.parent_id is not None:
                validate_reparent(menu.id, payload.parent_id, await get_descendant_ids(db, menu))
                new_parent = await db.get(Menu, payload.parent_id)
                if not new_parent:
                    raise MenuNotFound("New parent not found")
            await _move(db, menu, new_parent, keep_order=payload.order is not None)

        if payload.order is not None:
            menu.order = payload.order
        if payload.is_active is not None:
            menu.is_active = payload.is_active

        await db.flush()

    await db.refresh(menu)
    log.info("update: menu=%s slug=%s parent=%s order=%s", menu.id, menu.slug, menu.parent_id, menu.order)
    return menu


async def _move(db: AsyncSession, menu: Menu, new_parent, keep_order: bool):
    """Reattach ``menu`` under ``new_parent`` (None = root) and rewrite the subtree's paths."""
    old_prefix = menu.mpath
    new_prefix = build_path(menu.id, new_parent.mpath if new_parent else None)
    descendants = await get_descendants(db, menu)

    new_parent_id = new_parent.id if new_parent else None
    if not keep_order:
        await lock_sibling_group(db, new_parent_id)
        menu.order = await next_order(db, new_parent_id)

    log.info("move: menu=%s from=%s to=%s descendants=%s", menu.id, menu.parent_id, new_parent_id, len(descendants))
    menu.parent_id = new_parent_id
    menu.mpath = new_prefix
    for d in descendants:
        d.mpath = rebase_path(d.mpath, old_prefix, new_prefix)


async def delete_menu(db: AsyncSession, menu_id: int):
    async with transaction(db, "delete", menu_id):
        menu = await get_menu(db, menu_id)
        validate_delete(menu, await count_children(db, menu.id))
        await db.delete(menu)
    log.info("delete: menu=%s", menu_id)
    return menu
