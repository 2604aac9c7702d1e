"""
In-memory document store for the catalog and order services.

This module stands in for a document database (think one collection per
aggregate). It deliberately mirrors what such stores offer and nothing more:
- insert (store assigns the id)
- find by id
- save (full-document overwrite by id)
- page query by page NUMBER and page size, with the total document count

There is no "skip N documents" primitive. Callers that want absolute
offsets go through shared.pagination.

Design decisions:
- Menu items can be seeded from JSON fixtures in the data directory
- Documents are kept in insertion order, which is the natural page order
- Stored and returned documents are copies, so callers can't mutate the store by accident
- A lock guards every collection, since request handlers run on a thread pool
"""

import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Generic, Optional, TypeVar
from uuid import uuid4

from pydantic import BaseModel

from shared.models import MenuItem, Order

logger = logging.getLogger("data_store")

DocT = TypeVar("DocT", bound=BaseModel)


@dataclass
class Page(Generic[DocT]):
    """One page of a page-number query."""
    items: list[DocT]
    page_number: int
    page_size: int
    total_elements: int

    @property
    def has_next(self) -> bool:
        return (self.page_number + 1) * self.page_size < self.total_elements


class Collection(Generic[DocT]):
    """
    A single named collection of pydantic documents keyed by their `id` field.
    """

    def __init__(self, name: str):
        self.name = name
        self._documents: dict[str, DocT] = {}
        self._lock = threading.RLock()

    def insert(self, document: DocT) -> DocT:
        """Store a new document, assigning an id if it has none."""
        with self._lock:
            doc_id = document.id or uuid4().hex
            stored = document.model_copy(update={"id": doc_id}, deep=True)
            self._documents[doc_id] = stored
            logger.debug(f"Inserted {self.name}/{doc_id}")
            return stored.model_copy(deep=True)

    def save(self, document: DocT) -> DocT:
        """Insert or overwrite a document by id."""
        if document.id is None:
            return self.insert(document)
        with self._lock:
            stored = document.model_copy(deep=True)
            self._documents[document.id] = stored
            return stored.model_copy(deep=True)

    def find_by_id(self, doc_id: str) -> Optional[DocT]:
        with self._lock:
            document = self._documents.get(doc_id)
            return document.model_copy(deep=True) if document else None

    def exists(self, doc_id: str) -> bool:
        with self._lock:
            return doc_id in self._documents

    def delete(self, doc_id: str) -> bool:
        with self._lock:
            return self._documents.pop(doc_id, None) is not None

    def count(self) -> int:
        with self._lock:
            return len(self._documents)

    def find_page(self, page_number: int, page_size: int) -> Page[DocT]:
        """
        Fetch the Nth block of `page_size` documents (zero-based).

        A page past the end is empty but still reports the total count.
        """
        if page_number < 0:
            raise ValueError("page_number must be >= 0")
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        with self._lock:
            documents = list(self._documents.values())
        start = page_number * page_size
        items = [doc.model_copy(deep=True) for doc in documents[start:start + page_size]]
        return Page(
            items=items,
            page_number=page_number,
            page_size=page_size,
            total_elements=len(documents),
        )


class DataStore:
    """
    Holds the collections for both services.

    In a real deployment each service would own its own database:
    - Catalog service owns menu_items
    - Order service owns orders

    Sharing one process-local store keeps local runs and tests simple.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        """
        Initialize the data store.

        Args:
            data_dir: Directory containing JSON fixtures. When None, nothing
                     is seeded and the store starts empty.
        """
        self.data_dir = Path(data_dir) if data_dir is not None else None
        self._menu_items: Optional[Collection[MenuItem]] = None
        self._orders: Optional[Collection[Order]] = None
        self._load_lock = threading.Lock()

    # =========================================================================
    # Data Loading (lazy)
    # =========================================================================

    def _load_json(self, filename: str) -> list[dict]:
        """Load a JSON fixture file, or nothing if there is no fixture."""
        if self.data_dir is None:
            return []
        filepath = self.data_dir / filename
        if not filepath.exists():
            return []
        with open(filepath, "r") as f:
            return json.load(f)

    @property
    def menu_items(self) -> Collection[MenuItem]:
        with self._load_lock:
            if self._menu_items is None:
                collection: Collection[MenuItem] = Collection("menu_items")
                for data in self._load_json("menu_items.json"):
                    collection.insert(MenuItem(**data))
                self._menu_items = collection
                logger.info(f"Loaded {collection.count()} menu items")
        return self._menu_items

    @property
    def orders(self) -> Collection[Order]:
        with self._load_lock:
            if self._orders is None:
                collection: Collection[Order] = Collection("orders")
                for data in self._load_json("orders.json"):
                    collection.insert(Order(**data))
                self._orders = collection
        return self._orders

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def reload(self) -> None:
        """
        Drop all in-memory state; the next access re-reads the fixtures.
        """
        with self._load_lock:
            self._menu_items = None
            self._orders = None


# Module-level singleton for convenience
# In tests, create a new DataStore instance instead
_default_store: Optional[DataStore] = None


def get_data_store() -> DataStore:
    """Get the default data store singleton."""
    global _default_store
    if _default_store is None:
        from shared.config import get_settings
        _default_store = DataStore(data_dir=get_settings().data_dir)
    return _default_store
