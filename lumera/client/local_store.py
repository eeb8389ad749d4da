"""
Device-local persistence for the anonymous wishlist

``LocalStorage`` behaves like browser local storage: string values under
string keys, kept in one JSON file (or only in memory when no path is
given). ``LocalStore`` keeps the anonymous wishlist in one slot of it as a
serialized ordered list of product ids.
"""

from pathlib import Path
from typing import Dict, Iterable, List, Optional
import json
import logging

logger = logging.getLogger(__name__)

class LocalStorage:
    """String key/value storage backed by a JSON file"""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else None
        self._items: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        if self.path is None or not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable local storage file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed local storage file {self.path}")
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _flush(self):
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._items), encoding="utf-8")

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str):
        self._items[key] = value
        self._flush()

    def remove_item(self, key: str):
        if self._items.pop(key, None) is not None:
            self._flush()

    def __contains__(self, key: str) -> bool:
        return key in self._items

def _parse_ids(raw: Optional[str], key: str) -> List[str]:
    """Decode a slot value; anything malformed reads as an empty wishlist"""
    if raw is None:
        return []
    try:
        value = json.loads(raw)
    except ValueError:
        logger.warning(f"Local wishlist slot {key!r} is not valid JSON, starting empty")
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        logger.warning(f"Local wishlist slot {key!r} is not a list of ids, starting empty")
        return []

    ids: List[str] = []
    for item in value:
        if item not in ids:
            ids.append(item)
    return ids

class LocalStore:
    """Anonymous wishlist kept in a single local storage slot"""

    def __init__(self, storage: LocalStorage, key: str = "lumera-wishlist"):
        self.storage = storage
        self.key = key
        # Read once; every mutation writes through
        self._ids: List[str] = _parse_ids(storage.get_item(key), key)

    @property
    def ids(self) -> List[str]:
        return list(self._ids)

    def __contains__(self, product_id: str) -> bool:
        return product_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def _persist(self):
        self.storage.set_item(self.key, json.dumps(self._ids))

    def add(self, product_id: str) -> bool:
        """Append a product id; returns False if it was already present"""
        if product_id in self._ids:
            return False
        self._ids.append(product_id)
        self._persist()
        return True

    def remove(self, product_id: str) -> bool:
        """Drop a product id; returns False if it was absent"""
        if product_id not in self._ids:
            return False
        self._ids.remove(product_id)
        self._persist()
        return True

    def discard(self, product_ids: Iterable[str]) -> int:
        """
        Drop several product ids at once, leaving every other id in place.

        Returns how many were removed. A slot left empty is removed.
        """
        drop = set(product_ids)
        kept = [product_id for product_id in self._ids if product_id not in drop]
        removed = len(self._ids) - len(kept)
        if removed:
            self._ids = kept
            if kept:
                self._persist()
            else:
                self.storage.remove_item(self.key)
        return removed

    def clear(self):
        """Empty the wishlist and remove its slot"""
        self._ids = []
        self.storage.remove_item(self.key)
