"""
Storage collaborator for the matching engine.

The engine only talks to the ``MatchingStore`` protocol. ``JsonMatchingStore``
keeps the data as JSON files inside a data directory:

    data_dir/
      preferences/<uid>.json   one preference profile per user
      items.json               listed items with owner and photos
      exchanges.json           past exchanges with both item titles
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from threading import Lock
from typing import Any, Dict, List, Optional, Protocol, Sequence

from pydantic import ValidationError

from .errors import MatchingStoreError
from .models import (
    CandidateItem,
    ExchangeRecord,
    HistoricalExchange,
    ItemStatus,
    PreferencesInput,
    UserPreferences,
)

logger = logging.getLogger(__name__)

USER_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,128}$")


def is_valid_user_id(user_id: Optional[str]) -> bool:
    """True for ids made of letters, digits, underscores and dashes."""
    return bool(user_id) and USER_ID_PATTERN.fullmatch(user_id) is not None


@dataclass(slots=True, frozen=True)
class CandidateFilter:
    """Declarative filter for the candidate query."""

    exclude_owner_id: str
    status: ItemStatus = ItemStatus.AVAILABLE
    excluded_categories: Sequence[str] = field(default_factory=tuple)
    allowed_conditions: Sequence[str] = field(default_factory=tuple)
    excluded_item_ids: Sequence[str] = field(default_factory=tuple)

    def matches(self, item: CandidateItem) -> bool:
        if item.status != self.status:
            return False
        if item.owner_id == self.exclude_owner_id:
            return False
        if item.id in self.excluded_item_ids:
            return False
        if self.excluded_categories and item.category in self.excluded_categories:
            return False
        if self.allowed_conditions and item.condition not in self.allowed_conditions:
            return False
        return True


class MatchingStore(Protocol):
    """Read/write interface the engine needs from persistence."""

    def get_preferences(self, user_id: str) -> Optional[UserPreferences]:
        """Return the stored profile or None."""

    def upsert_preferences(self, user_id: str, fields: PreferencesInput) -> UserPreferences:
        """Create or fully replace the profile."""

    def list_owned_item_ids(self, user_id: str) -> List[str]:
        """Ids of every item owned by the user."""

    def list_historical_exchanges(self, user_id: str) -> List[HistoricalExchange]:
        """Exchanges where the user is requester or responder."""

    def list_candidate_items(self, candidate_filter: CandidateFilter, limit: int) -> List[CandidateItem]:
        """Items matching the filter, most popular first."""

    def count_items(self, category: Optional[str] = None) -> int:
        """Count all items, or the items of one category."""


class JsonMatchingStore:
    """File-backed ``MatchingStore`` implementation."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        self.preferences_dir = self.data_dir / "preferences"
        self.items_file = self.data_dir / "items.json"
        self.exchanges_file = self.data_dir / "exchanges.json"
        self._lock = Lock()

        self.preferences_dir.mkdir(parents=True, exist_ok=True)

    # Preferences --------------------------------------------------------------

    def get_preferences(self, user_id: str) -> Optional[UserPreferences]:
        path = self._preferences_file(user_id)
        if not path.exists():
            return None
        data = self._read_json(path)
        try:
            return UserPreferences.model_validate(data)
        except ValidationError as exc:
            raise MatchingStoreError(f"Invalid preferences record for {user_id}: {exc}") from exc

    def upsert_preferences(self, user_id: str, fields: PreferencesInput) -> UserPreferences:
        now = datetime.now().astimezone().isoformat(timespec="seconds")
        with self._lock:
            existing = self.get_preferences(user_id)
            preferences = UserPreferences(
                user_id=user_id,
                preferred_categories=list(fields.preferred_categories),
                disliked_categories=list(fields.disliked_categories),
                preferred_conditions=list(fields.preferred_conditions),
                locale=fields.locale,
                country=fields.country,
                radius_km=fields.radius_km,
                created_at=existing.created_at if existing and existing.created_at else now,
                updated_at=now,
            )
            self._write_json(self._preferences_file(user_id), preferences.to_dict())
        logger.info(f"Saved preferences for user {user_id}")
        return preferences

    # Items --------------------------------------------------------------------

    def list_owned_item_ids(self, user_id: str) -> List[str]:
        return [item.id for item in self.list_items() if item.owner_id == user_id]

    def list_candidate_items(self, candidate_filter: CandidateFilter, limit: int) -> List[CandidateItem]:
        matching = [item for item in self.list_items() if candidate_filter.matches(item)]
        # stable sort: equal popularity keeps file order
        matching.sort(key=lambda item: item.popularity_score, reverse=True)
        return matching[: max(0, limit)]

    def count_items(self, category: Optional[str] = None) -> int:
        items = self.list_items()
        if category is None:
            return len(items)
        return sum(1 for item in items if item.category == category)

    def save_items(self, items: Sequence[CandidateItem]) -> None:
        """Replace the item catalogue (used by seeding scripts and tests)."""
        with self._lock:
            self._write_json(self.items_file, [item.to_dict() for item in items])

    # Exchanges ----------------------------------------------------------------

    def list_historical_exchanges(self, user_id: str) -> List[HistoricalExchange]:
        return [
            HistoricalExchange(
                requested_item_title=record.requested_item_title,
                offered_item_title=record.offered_item_title,
            )
            for record in self.list_exchanges()
            if record.involves(user_id)
        ]

    def save_exchanges(self, exchanges: Sequence[ExchangeRecord]) -> None:
        """Replace the exchange history (used by seeding scripts and tests)."""
        with self._lock:
            self._write_json(self.exchanges_file, [record.to_dict() for record in exchanges])

    # Raw records --------------------------------------------------------------

    def list_items(self) -> List[CandidateItem]:
        return self._load_records(self.items_file, CandidateItem)

    def list_exchanges(self) -> List[ExchangeRecord]:
        return self._load_records(self.exchanges_file, ExchangeRecord)

    # Internals ----------------------------------------------------------------

    def _preferences_file(self, user_id: str) -> Path:
        if not is_valid_user_id(user_id):
            raise MatchingStoreError(f"Invalid user id: {user_id!r}")
        path = self.preferences_dir / f"{user_id}.json"
        if not path.resolve().is_relative_to(self.preferences_dir.resolve()):
            raise MatchingStoreError(f"Invalid user id: {user_id!r}")
        return path

    def _load_records(self, path: Path, model: Any) -> List[Any]:
        if not path.exists():
            return []
        raw = self._read_json(path)
        if not isinstance(raw, list):
            raise MatchingStoreError(f"Expected a list in {path.name}")
        try:
            return [model.model_validate(entry) for entry in raw]
        except ValidationError as exc:
            raise MatchingStoreError(f"Invalid record in {path.name}: {exc}") from exc

    def _read_json(self, path: Path) -> Any:
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.error(f"Error reading {path}: {exc}")
            raise MatchingStoreError(f"Corrupt store file: {path.name}") from exc

    def _write_json(self, path: Path, data: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        # readers never see a half-written file
        temp_path = path.with_name(f"{path.name}.tmp")
        try:
            temp_path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
            temp_path.replace(path)
        except OSError as exc:
            logger.error(f"Error writing {path}: {exc}")
            temp_path.unlink(missing_ok=True)
            raise MatchingStoreError(f"Cannot write store file: {path.name}") from exc
