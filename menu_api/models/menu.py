from datetime import datetime
import uuid

from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime, Index
from menu_api.models.base import Base
from menu_api.utils.slug import SLUG_MAX_LENGTH

PATH_SEPARATOR = "."


class Menu(Base):
    __tablename__ = "menus"

    id = Column(Integer, primary_key=True, autoincrement=True)
    uid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    name = Column(String(150), unique=True, nullable=False)
    slug = Column(String(SLUG_MAX_LENGTH), unique=True, nullable=False)
    order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    parent_id = Column(Integer, ForeignKey("menus.id", ondelete="RESTRICT"), nullable=True)
    # ancestor ids plus own id, each followed by "." e.g. "1.4.9."
    mpath = Column(String, nullable=False, default="")

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index(
            "uq_menus_parent_order",
            "parent_id", "order",
            unique=True,
            postgresql_where=parent_id.isnot(None),
            sqlite_where=parent_id.isnot(None),
        ),
        Index(
            "uq_menus_root_order",
            "order",
            unique=True,
            postgresql_where=parent_id.is_(None),
            sqlite_where=parent_id.is_(None),
        ),
        Index("idx_menus_parent", "parent_id"),
        Index("idx_menus_mpath", "mpath"),
    )

    @property
    def depth(self) -> int:
        return max(0, (self.mpath or "").count(PATH_SEPARATOR) - 1)

    def __repr__(self):
        return f"<Menu id={self.id} slug={self.slug!r} parent_id={self.parent_id}>"
