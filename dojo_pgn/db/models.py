# ==============================================================================
# models.py  –  Value objects handed to / received from the game store
# ------------------------------------------------------------------------------
# Responsibilities:
#   • User        – owner context supplied by the user lookup
#   • GameRecord  – full row for a newly imported game
#   • GameUpdate  – partial row; unset fields are left alone by the store
#   • to_item()   – camelCase mapping ready for the store
# ==============================================================================

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

NOT_FEATURED = "NOT_FEATURED"


@dataclass(frozen=True)
class User:
    username: str
    display_name: str = ""
    dojo_cohort: str = ""
    previous_cohort: str = ""

    @classmethod
    def from_item(cls, item: Mapping[str, Any]) -> "User":
        """Build a User from the store's `{Username, DisplayName, …}` shape."""
        return cls(
            username=item["Username"],
            display_name=item.get("DisplayName", ""),
            dojo_cohort=item.get("DojoCohort", ""),
            previous_cohort=item.get("PreviousCohort", ""),
        )


@dataclass(frozen=True)
class GameRecord:
    cohort: str
    id: str
    white: str
    black: str
    date: str
    owner: str
    owner_display_name: str
    owner_previous_cohort: str
    headers: Dict[str, str]
    pgn: str
    is_featured: bool = False
    featured_at: str = NOT_FEATURED

    def to_item(self) -> Dict[str, Any]:
        """Store mapping; `isFeatured` is indexed as a string key."""
        return {
            "cohort": self.cohort,
            "id": self.id,
            "white": self.white,
            "black": self.black,
            "date": self.date,
            "owner": self.owner,
            "ownerDisplayName": self.owner_display_name,
            "ownerPreviousCohort": self.owner_previous_cohort,
            "headers": dict(self.headers),
            "isFeatured": "true" if self.is_featured else "false",
            "featuredAt": self.featured_at,
            "pgn": self.pgn,
        }


@dataclass(frozen=True)
class GameUpdate:
    white: Optional[str] = None
    black: Optional[str] = None
    headers: Optional[Dict[str, str]] = None
    pgn: Optional[str] = None

    def to_item(self) -> Dict[str, Any]:
        item: Dict[str, Any] = {}
        if self.white is not None:
            item["white"] = self.white
        if self.black is not None:
            item["black"] = self.black
        if self.headers is not None:
            item["headers"] = dict(self.headers)
        if self.pgn is not None:
            item["pgn"] = self.pgn
        return item
