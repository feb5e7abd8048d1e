"""Business logic for registry operations.

``RegistryService`` is the single entry point used by the CLI and the API.
It serializes every store and codec call behind one lock, so save and load
are whole-collection operations and no caller observes a partial mutation.

``get_registry()`` returns a process-wide singleton bound to
``settings.REGISTRY_FILE``.
"""

import logging
import threading
from collections.abc import Iterable
from datetime import date
from pathlib import Path

from animal_registry.config import settings
from animal_registry.db.persistence import load_registry, save_registry
from animal_registry.db.registry_store import RegistryStore
from animal_registry.models.animal import (
    AnimalKind,
    AnimalRecord,
    CategoryCounts,
    new_animal,
)

logger = logging.getLogger(__name__)


class RegistryService:
    """Thread-safe facade over a ``RegistryStore`` and its backing file."""

    def __init__(self, path: Path | str | None = None, store: RegistryStore | None = None) -> None:
        self.path = Path(path) if path is not None else settings.REGISTRY_FILE
        self._store = store if store is not None else RegistryStore()
        self._lock = threading.RLock()

    @property
    def next_id(self) -> int:
        with self._lock:
            return self._store.next_id

    def add_animal(
        self,
        kind: AnimalKind | str | int,
        name: str,
        birth_date: date,
        commands: Iterable[str] = (),
        allow_duplicate: bool = False,
    ) -> AnimalRecord:
        """Create and add an animal.

        Raises ``InvalidType`` for an unknown kind and ``DuplicateFound`` when
        an equivalent animal exists and *allow_duplicate* is not set.
        """
        candidate = new_animal(kind, name, birth_date, commands)
        with self._lock:
            return self._store.add(candidate, allow_duplicate=allow_duplicate)

    def get_animal(self, animal_id: int) -> AnimalRecord:
        with self._lock:
            return self._store.find_by_id(animal_id)

    def list_animals(self) -> list[AnimalRecord]:
        with self._lock:
            return self._store.all()

    def list_commands(self, animal_id: int) -> list[str]:
        with self._lock:
            return self._store.list_commands(animal_id)

    def train(self, animal_id: int, command: str) -> AnimalRecord:
        with self._lock:
            return self._store.train(animal_id, command)

    def edit(
        self,
        animal_id: int,
        name: str,
        birth_date: date,
        commands: Iterable[str],
    ) -> AnimalRecord:
        with self._lock:
            return self._store.edit(animal_id, name, birth_date, commands)

    def remove(self, animal_id: int) -> AnimalRecord:
        with self._lock:
            return self._store.remove(animal_id)

    def list_by_birth_date(self) -> list[AnimalRecord]:
        with self._lock:
            return list(self._store.list_sorted_by_birth_date())

    def filter_by_kind(self, kind: AnimalKind | str | int) -> list[AnimalRecord]:
        with self._lock:
            return self._store.filter_by_kind(kind)

    def summary(self) -> tuple[CategoryCounts, list[AnimalRecord]]:
        """Return category counts together with a consistent snapshot of the records."""
        with self._lock:
            return self._store.count_by_category(), self._store.all()

    def save(self) -> int:
        """Persist the whole registry. Returns the number of animals saved."""
        with self._lock:
            animals = self._store.all()
            save_registry(animals, self.path)
            return len(animals)

    def load(self) -> int:
        """Replace the registry with the file contents. Returns the number loaded.

        On ``IOFailure`` or ``CorruptData`` the in-memory registry is unchanged.
        """
        with self._lock:
            animals = load_registry(self.path)
            self._store.replace_all(animals)
            return len(animals)


# ---------------------------------------------------------------------------
# Singleton factory
# ---------------------------------------------------------------------------
_registry: RegistryService | None = None


def get_registry() -> RegistryService:
    """Return the singleton ``RegistryService`` instance."""
    global _registry
    if _registry is None:
        logger.info("Using registry file %s", settings.REGISTRY_FILE)
        _registry = RegistryService(settings.REGISTRY_FILE)
    return _registry
