# menu_api/utils/slug.py
import re
import unicodedata
import uuid

_WHITESPACE = re.compile(r"\s+")
_HYPHEN_RUN = re.compile(r"-+")
_EXTRA_CHARS = {"-", "_", ".", "~"}

SLUG_MAX_LENGTH = 180


def _keep(ch: str) -> bool:
    # Unicode letters (L*) and numbers (N*), plus a few URL-safe punctuation marks
    return ch in _EXTRA_CHARS or unicodedata.category(ch)[0] in ("L", "N")


def is_empty_or_hyphens(value) -> bool:
    """True for None, "" and strings made of nothing but hyphens/whitespace ("-", "---")."""
    if not value:
        return True
    return not value.replace("-", "").strip()


def normalize_slug(text) -> str:
    """
    Unicode-friendly slug:
    - NFKC normalize and trim
    - whitespace runs -> '-'
    - keep unicode letters/numbers and -_.~
    - collapse repeated '-', strip '-' at both ends
    """
    if not text:
        return ""
    s = unicodedata.normalize("NFKC", text).strip()
    s = _WHITESPACE.sub("-", s)
    s = "".join(ch for ch in s if _keep(ch))
    s = _HYPHEN_RUN.sub("-", s).strip("-")
    return s


def random_slug(prefix: str = "menu") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def truncate_slug(slug: str, max_length: int = SLUG_MAX_LENGTH) -> str:
    """Cut ``slug`` to ``max_length`` characters without leaving a dangling '-'."""
    return slug[:max_length].rstrip("-")
