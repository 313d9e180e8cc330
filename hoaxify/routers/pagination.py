from typing import Optional

MAX_PAGE_SIZE = 10


def _as_int(raw: Optional[str]) -> Optional[int]:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def pagination(page: Optional[str] = None, size: Optional[str] = None) -> tuple[int, int]:
    """Lenient page/size query params: bad page -> 0, bad size -> 10."""
    p = _as_int(page)
    s = _as_int(size)
    if p is None or p < 0:
        p = 0
    if s is None or s < 1 or s > MAX_PAGE_SIZE:
        s = MAX_PAGE_SIZE
    return p, s
