"""Recent-search window and favorites list updates.

Both functions return new lists and leave their input untouched, so callers
can swap the result into immutable session state.
"""

from __future__ import annotations

import uuid
from typing import List, Sequence

from app.domain import RecentSearch

RECENT_SEARCH_LIMIT = 5


def update_recent_searches(
    history: Sequence[RecentSearch],
    new_name: str,
    limit: int = RECENT_SEARCH_LIMIT,
) -> List[RecentSearch]:
    """Prepend ``new_name`` and keep the ``limit`` most recent entries.

    Empty names and names already in the window (exact match) leave the
    history unchanged.
    """
    if not new_name or any(entry.name == new_name for entry in history):
        return list(history)
    entry = RecentSearch(id=str(uuid.uuid4()), name=new_name)
    return [entry, *history][:limit]


def toggle_favorite(favorites: Sequence[str], name: str) -> List[str]:
    """Remove ``name`` if present (exact match), otherwise append it."""
    if name in favorites:
        return [fav for fav in favorites if fav != name]
    return [*favorites, name]
