"""Pydantic models for animal records."""

from collections.abc import Iterable
from datetime import date
from enum import Enum

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, ConfigDict, Field, field_validator

from animal_registry.errors import InvalidType


class AnimalCategory(str, Enum):
    """Secondary classification of animal kinds."""

    PET = "pet"
    PACK_ANIMAL = "pack_animal"


class AnimalKind(str, Enum):
    """Closed set of animal kinds. Declaration order is the menu order."""

    DOG = "dog"
    CAT = "cat"
    HAMSTER = "hamster"
    HORSE = "horse"
    CAMEL = "camel"
    DONKEY = "donkey"

    @property
    def label(self) -> str:
        return _KIND_LABELS[self]

    @property
    def category(self) -> AnimalCategory:
        return _KIND_CATEGORIES[self]

    @classmethod
    def parse(cls, value: "AnimalKind | str | int") -> "AnimalKind":
        """Resolve an enum member, a value/label (case-insensitive) or a 1-based menu number.

        Raises ``InvalidType`` for anything else.
        """
        if isinstance(value, cls):
            return value
        members = list(cls)
        if isinstance(value, int) and not isinstance(value, bool):
            if 1 <= value <= len(members):
                return members[value - 1]
            raise InvalidType(f"Unknown animal type: {value}")
        if isinstance(value, str):
            key = value.strip().lower()
            if key.isascii() and key.isdecimal():
                return cls.parse(int(key))
            for member in members:
                if key in (member.value, member.label.lower()):
                    return member
        raise InvalidType(f"Unknown animal type: {value!r}")


_KIND_LABELS: dict[AnimalKind, str] = {
    AnimalKind.DOG: "Dog",
    AnimalKind.CAT: "Cat",
    AnimalKind.HAMSTER: "Hamster",
    AnimalKind.HORSE: "Horse",
    AnimalKind.CAMEL: "Camel",
    AnimalKind.DONKEY: "Donkey",
}

_KIND_CATEGORIES: dict[AnimalKind, AnimalCategory] = {
    AnimalKind.DOG: AnimalCategory.PET,
    AnimalKind.CAT: AnimalCategory.PET,
    AnimalKind.HAMSTER: AnimalCategory.PET,
    AnimalKind.HORSE: AnimalCategory.PACK_ANIMAL,
    AnimalKind.CAMEL: AnimalCategory.PACK_ANIMAL,
    AnimalKind.DONKEY: AnimalCategory.PACK_ANIMAL,
}


def normalize_commands(commands: Iterable[str]) -> list[str]:
    """Trim each command, drop blanks and case-insensitive repeats (first spelling wins)."""
    result: list[str] = []
    seen: set[str] = set()
    for command in commands:
        trimmed = command.strip()
        folded = trimmed.lower()
        if not trimmed or folded in seen:
            continue
        seen.add(folded)
        result.append(trimmed)
    return result


def parse_commands(text: str) -> list[str]:
    """Split comma-separated user input into a command list."""
    return normalize_commands(text.split(","))


def command_key(command: str) -> str:
    """Comparison key for a command: trimmed and case-folded."""
    return command.strip().lower()


class NewAnimal(BaseModel):
    """An animal that has not been added to a registry yet (no id).

    Frozen: the registry replaces records instead of mutating them in place.
    """

    model_config = ConfigDict(frozen=True)

    kind: AnimalKind = Field(..., description="Concrete animal kind")
    name: str = Field(..., description="Animal name")
    birth_date: date = Field(..., description="Date of birth")
    commands: tuple[str, ...] = Field((), description="Trained commands in insertion order")

    @field_validator("commands")
    @classmethod
    def _normalize_commands(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(normalize_commands(value))

    @property
    def type_label(self) -> str:
        return self.kind.label

    @property
    def category(self) -> AnimalCategory:
        return self.kind.category

    @property
    def is_pet(self) -> bool:
        return self.kind.category is AnimalCategory.PET

    @property
    def is_pack_animal(self) -> bool:
        return self.kind.category is AnimalCategory.PACK_ANIMAL

    def knows(self, command: str) -> bool:
        """Return *True* if *command* matches a known command case-insensitively."""
        key = command_key(command)
        return any(command_key(c) == key for c in self.commands)


class AnimalRecord(NewAnimal):
    """An animal stored in a registry. ``id`` and ``kind`` never change."""

    id: int = Field(..., ge=1, description="Registry-assigned identifier")


class CategoryCounts(BaseModel):
    """Record counts for the categorized summary."""

    total: int = 0
    pets: int = 0
    pack_animals: int = 0
    by_kind: dict[AnimalKind, int] = Field(default_factory=lambda: {kind: 0 for kind in AnimalKind})


def new_animal(
    kind: AnimalKind | str | int,
    name: str,
    birth_date: date,
    commands: Iterable[str] = (),
) -> NewAnimal:
    """Build an id-less animal, raising ``InvalidType`` for an unknown kind."""
    return NewAnimal(
        kind=AnimalKind.parse(kind),
        name=name,
        birth_date=birth_date,
        commands=list(commands),
    )


def same_animal(a: NewAnimal, b: NewAnimal) -> bool:
    """Duplicate rule used when adding.

    Same concrete kind, case-insensitive name, identical birth date and the
    same set of trimmed, case-folded commands. Deliberately not ``__eq__``.
    """
    if a is b:
        return True
    if a.kind is not b.kind:
        return False
    if a.name.lower() != b.name.lower():
        return False
    if a.birth_date != b.birth_date:
        return False
    return {command_key(c) for c in a.commands} == {command_key(c) for c in b.commands}


def age_on(birth_date: date, today: date | None = None) -> tuple[int, int]:
    """Return whole ``(years, months)`` elapsed since *birth_date*.

    Calendar-aware: 2020-01-15 to 2021-03-14 is 1 year and 1 month.
    Negative for birth dates in the future.
    """
    delta = relativedelta(today or date.today(), birth_date)
    return delta.years, delta.months
