#!/usr/bin/env python3
"""
Matching data management script.

- import a seed file of items and exchanges into the data directory
- validate the store and print catalogue statistics
- explain the recommendations computed for one user

Examples:
    python manage_matching_data.py --import-seed seed.json
    python manage_matching_data.py --stats
    python manage_matching_data.py --explain alice --limit 10
"""

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from matching_service.errors import MatchingStoreError
from matching_service.models import CandidateItem, ExchangeRecord
from matching_service.recommendations import MatchingEngine
from matching_service.storage import JsonMatchingStore

# Set up logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


class MatchingDataManager:
    """Seeds, validates and inspects a matching data directory."""

    def __init__(self, data_dir: Path):
        self.store = JsonMatchingStore(data_dir)

    def import_seed(self, seed_file: Path) -> Dict[str, int]:
        """Replace items and exchanges with the content of ``seed_file``.

        The seed file is ``{"items": [...], "exchanges": [...]}`` using the
        same camelCase records the store writes.
        """
        seed = json.loads(seed_file.read_text(encoding="utf-8"))
        items = [CandidateItem.model_validate(entry) for entry in seed.get("items", [])]
        exchanges = [ExchangeRecord.model_validate(entry) for entry in seed.get("exchanges", [])]

        self.store.save_items(items)
        self.store.save_exchanges(exchanges)
        logger.info(f"Imported {len(items)} items and {len(exchanges)} exchanges from {seed_file}")
        return {"items": len(items), "exchanges": len(exchanges)}

    def get_stats(self) -> Dict[str, Any]:
        """Validate every store file and summarize the catalogue."""
        items = self.store.list_items()
        exchanges = self.store.list_exchanges()

        categories: Dict[str, int] = {}
        statuses: Dict[str, int] = {}
        for item in items:
            categories[item.category] = categories.get(item.category, 0) + 1
            statuses[item.status.value] = statuses.get(item.status.value, 0) + 1

        invalid_profiles: List[str] = []
        profiles = 0
        for path in sorted(self.store.preferences_dir.glob("*.json")):
            try:
                self.store.get_preferences(path.stem)
                profiles += 1
            except MatchingStoreError as exc:
                logger.warning(f"Invalid preferences file {path.name}: {exc}")
                invalid_profiles.append(path.stem)

        return {
            "items_total": len(items),
            "items_by_category": categories,
            "items_by_status": statuses,
            "exchanges_total": len(exchanges),
            "preference_profiles": profiles,
            "invalid_profiles": invalid_profiles,
        }

    def explain(self, user_id: str, limit: int) -> Dict[str, Any]:
        """Run the engine for one user and return the full response."""
        engine = MatchingEngine(store=self.store)
        return engine.get_recommendations(user_id, limit).to_dict()


def main():
    parser = argparse.ArgumentParser(description="Matching data management script")
    parser.add_argument("--data-dir", type=Path, default=Path("data"),
                       help="Directory containing matching data files")
    parser.add_argument("--import-seed", type=Path,
                       help="Seed file with items and exchanges to import")
    parser.add_argument("--stats", action="store_true",
                       help="Validate the store and show catalogue statistics")
    parser.add_argument("--explain", metavar="USER_ID",
                       help="Print recommendations and reasons for a user")
    parser.add_argument("--limit", type=int, default=20,
                       help="Number of recommendations for --explain (1-50)")

    args = parser.parse_args()

    if not 1 <= args.limit <= 50:
        parser.error("--limit must be between 1 and 50")

    manager = MatchingDataManager(args.data_dir)

    if args.import_seed:
        print(json.dumps(manager.import_seed(args.import_seed), indent=2))

    if args.stats:
        print(json.dumps(manager.get_stats(), indent=2, ensure_ascii=False))

    if args.explain:
        print(json.dumps(manager.explain(args.explain, args.limit), indent=2, ensure_ascii=False))

    if not (args.import_seed or args.stats or args.explain):
        parser.print_help()


if __name__ == "__main__":
    main()
