"""In-memory registry of animal records.

``RegistryStore`` keeps an ordered list of ``AnimalRecord`` values and owns
its own ``IdSequence``, so independent stores (e.g. in tests) never share ids.
Records are frozen; edit and train swap in a validated replacement, so a
failed operation leaves the list untouched.
"""

import logging
from collections.abc import Iterable, Iterator
from datetime import date

from animal_registry.errors import AlreadyKnown, CorruptData, DuplicateFound, InvalidCommand, NotFound
from animal_registry.models.animal import (
    AnimalKind,
    AnimalRecord,
    CategoryCounts,
    NewAnimal,
    same_animal,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Id sequence
# ---------------------------------------------------------------------------

class IdSequence:
    """Monotonic id generator: ids are never reused, even after deletions."""

    INITIAL = 1

    def __init__(self, start: int = INITIAL) -> None:
        self._next = start

    @property
    def peek(self) -> int:
        """Return the id the next call to ``next()`` will issue."""
        return self._next

    def next(self) -> int:
        value = self._next
        self._next += 1
        return value

    def reset_after(self, max_id: int | None) -> None:
        """Continue after *max_id*, or restart at ``INITIAL`` when there is none."""
        self._next = self.INITIAL if max_id is None else max_id + 1


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class RegistryStore:
    """Ordered collection of animal records."""

    def __init__(self) -> None:
        self._animals: list[AnimalRecord] = []
        self._ids = IdSequence()

    def __len__(self) -> int:
        return len(self._animals)

    def __iter__(self) -> Iterator[AnimalRecord]:
        return iter(list(self._animals))

    @property
    def next_id(self) -> int:
        return self._ids.peek

    def all(self) -> list[AnimalRecord]:
        """Return all records in registry order."""
        return list(self._animals)

    # -- lookup --

    def _index_of(self, animal_id: int) -> int:
        for i, animal in enumerate(self._animals):
            if animal.id == animal_id:
                return i
        raise NotFound(animal_id)

    def find_by_id(self, animal_id: int) -> AnimalRecord:
        return self._animals[self._index_of(animal_id)]

    def find_duplicate(self, candidate: NewAnimal) -> AnimalRecord | None:
        """Return the first stored record equivalent to *candidate*, if any."""
        return next((a for a in self._animals if same_animal(a, candidate)), None)

    # -- mutations --

    def add(self, candidate: NewAnimal, allow_duplicate: bool = False) -> AnimalRecord:
        """Append *candidate* under a fresh id.

        Raises ``DuplicateFound`` when an equivalent record exists and
        *allow_duplicate* is not set; no id is consumed in that case.
        """
        existing = self.find_duplicate(candidate)
        if existing is not None and not allow_duplicate:
            raise DuplicateFound(
                f"{candidate.type_label} '{candidate.name}' already exists as animal {existing.id}",
                existing,
            )
        record = AnimalRecord(id=self._ids.next(), **candidate.model_dump())
        self._animals.append(record)
        logger.info("Added %s '%s' as animal %d", record.kind.value, record.name, record.id)
        return record

    def remove(self, animal_id: int) -> AnimalRecord:
        """Delete a record. The id stays reserved."""
        removed = self._animals.pop(self._index_of(animal_id))
        logger.info("Removed animal %d", animal_id)
        return removed

    def train(self, animal_id: int, command: str) -> AnimalRecord:
        """Teach a new command, appended after the existing ones."""
        index = self._index_of(animal_id)
        animal = self._animals[index]
        trimmed = command.strip()
        if not trimmed:
            raise InvalidCommand("Command must not be blank")
        if animal.knows(trimmed):
            raise AlreadyKnown(f"Animal {animal_id} already knows '{trimmed}'")
        updated = animal.model_copy(update={"commands": animal.commands + (trimmed,)})
        self._animals[index] = updated
        logger.info("Animal %d learned '%s'", animal_id, trimmed)
        return updated

    def edit(
        self,
        animal_id: int,
        name: str,
        birth_date: date,
        commands: Iterable[str],
    ) -> AnimalRecord:
        """Replace name, birth date and the whole command list. ``id`` and ``kind`` are kept."""
        index = self._index_of(animal_id)
        current = self._animals[index]
        updated = AnimalRecord(
            id=current.id,
            kind=current.kind,
            name=name,
            birth_date=birth_date,
            commands=tuple(commands),
        )
        self._animals[index] = updated
        logger.info("Edited animal %d", animal_id)
        return updated

    def replace_all(self, records: Iterable[AnimalRecord]) -> None:
        """Swap in a whole new collection and continue ids after its maximum.

        Raises ``CorruptData`` on repeated ids, leaving the store unchanged.
        """
        loaded = list(records)
        seen: set[int] = set()
        for record in loaded:
            if record.id in seen:
                raise CorruptData(f"Duplicate animal id {record.id}")
            seen.add(record.id)
        self._animals = loaded
        self._ids.reset_after(max(seen) if seen else None)
        logger.info("Registry replaced with %d animals (next id %d)", len(loaded), self._ids.peek)

    # -- listings --

    def list_commands(self, animal_id: int) -> list[str]:
        return list(self.find_by_id(animal_id).commands)

    def list_sorted_by_birth_date(self) -> Iterator[AnimalRecord]:
        """Yield records by ascending birth date; ties keep registry order."""
        yield from sorted(self._animals, key=lambda a: a.birth_date)

    def filter_by_kind(self, kind: AnimalKind | str | int) -> list[AnimalRecord]:
        wanted = AnimalKind.parse(kind)
        return [a for a in self._animals if a.kind is wanted]

    def count_by_category(self) -> CategoryCounts:
        counts = CategoryCounts()
        for animal in self._animals:
            counts.total += 1
            counts.by_kind[animal.kind] += 1
            if animal.is_pet:
                counts.pets += 1
            else:
                counts.pack_animals += 1
        return counts
