"""Interactive menu for the animal registry.

Run ``animal-registry`` and pick actions by number. Every action maps to one
``RegistryService`` operation; registry errors are reported and the menu is
shown again.
"""

import logging
from datetime import date
from pathlib import Path

import click

from animal_registry.config import LOG_FORMAT, settings
from animal_registry.errors import DuplicateFound, RegistryError
from animal_registry.models.animal import AnimalKind, parse_commands
from animal_registry.services.formatter import (
    SUPPORTED_LOCALES,
    describe,
    format_commands,
    format_summary,
    resolve_locale,
)
from animal_registry.services.registry_service import RegistryService

logger = logging.getLogger(__name__)


class IsoDate(click.ParamType):
    """Strict ``YYYY-MM-DD`` date; ``2020-1-1`` and other ISO variants are rejected."""

    name = "date"

    def convert(self, value, param, ctx) -> date:
        if isinstance(value, date):
            return value
        text = str(value).strip()
        try:
            parsed = date.fromisoformat(text)
        except ValueError:
            parsed = None
        if parsed is None or parsed.isoformat() != text:
            self.fail(f"{value!r} is not a valid date in YYYY-MM-DD format.", param, ctx)
        return parsed


DATE_TYPE = IsoDate()

MENU = """
1. Add animal
2. Load from file
3. List animal commands
4. Train animal
5. List animals by birth date
6. Filter animals by type
7. Delete animal
8. Edit animal
9. Show all animals
10. Save to file
11. Exit
"""

EXIT_CHOICE = 11


def _echo_kind_menu() -> None:
    click.echo("Animal types:")
    for number, kind in enumerate(AnimalKind, start=1):
        click.echo(f"  {number}. {kind.label}")


def _prompt_kind() -> AnimalKind:
    _echo_kind_menu()
    return AnimalKind.parse(click.prompt("Type", type=int))


def _prompt_id(text: str = "Animal ID") -> int:
    return click.prompt(text, type=int)


def _prompt_date(default: date | None = None) -> date:
    return click.prompt(
        "Birth date (YYYY-MM-DD)",
        type=DATE_TYPE,
        default=default.isoformat() if default else None,
    )


def _prompt_commands(default: str | None = None) -> list[str]:
    text = click.prompt("Commands (comma-separated)", default=default or "", show_default=bool(default))
    return parse_commands(text)


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

def add_animal(registry: RegistryService, locale: str) -> None:
    kind = _prompt_kind()
    name = click.prompt("Name")
    birth_date = _prompt_date()
    commands = _prompt_commands()
    try:
        record = registry.add_animal(kind, name, birth_date, commands)
    except DuplicateFound as exc:
        click.echo(f"Animal already exists: {describe(exc.existing, locale=locale)}")
        if not click.confirm("Add it anyway?", default=False):
            click.echo("Not added.")
            return
        record = registry.add_animal(kind, name, birth_date, commands, allow_duplicate=True)
    click.echo(f"Animal added with ID {record.id}.")


def load_animals(registry: RegistryService, locale: str) -> None:
    count = registry.load()
    click.echo(f"Loaded {count} animals from {registry.path}.")


def list_commands(registry: RegistryService, locale: str) -> None:
    commands = registry.list_commands(_prompt_id())
    click.echo(f"Commands: {format_commands(commands)}")


def train_animal(registry: RegistryService, locale: str) -> None:
    animal_id = _prompt_id()
    registry.get_animal(animal_id)
    command = click.prompt("New command")
    registry.train(animal_id, command)
    click.echo("Command added.")


def list_by_birth_date(registry: RegistryService, locale: str) -> None:
    animals = registry.list_by_birth_date()
    if not animals:
        click.echo("No animals registered.")
    for animal in animals:
        click.echo(describe(animal, locale=locale))


def filter_by_kind(registry: RegistryService, locale: str) -> None:
    kind = _prompt_kind()
    animals = registry.filter_by_kind(kind)
    if not animals:
        click.echo(f"No animals of type {kind.label}.")
    for animal in animals:
        click.echo(describe(animal, locale=locale))


def delete_animal(registry: RegistryService, locale: str) -> None:
    removed = registry.remove(_prompt_id("Animal ID to delete"))
    click.echo(f"Animal {removed.id} deleted.")


def edit_animal(registry: RegistryService, locale: str) -> None:
    current = registry.get_animal(_prompt_id("Animal ID to edit"))
    name = click.prompt("New name", default=current.name)
    birth_date = _prompt_date(default=current.birth_date)
    commands = _prompt_commands(default=format_commands(current.commands))
    registry.edit(current.id, name, birth_date, commands)
    click.echo("Animal updated.")


def show_all(registry: RegistryService, locale: str) -> None:
    counts, animals = registry.summary()
    for line in format_summary(counts, animals, locale=locale):
        click.echo(line)


def save_animals(registry: RegistryService, locale: str) -> None:
    count = registry.save()
    click.echo(f"Saved {count} animals to {registry.path}.")


ACTIONS = {
    1: add_animal,
    2: load_animals,
    3: list_commands,
    4: train_animal,
    5: list_by_birth_date,
    6: filter_by_kind,
    7: delete_animal,
    8: edit_animal,
    9: show_all,
    10: save_animals,
}


def run_menu(registry: RegistryService, locale: str) -> None:
    """Show the menu until the user picks Exit."""
    while True:
        click.echo(MENU)
        choice = click.prompt("Choose an action", type=click.IntRange(1, EXIT_CHOICE))
        if choice == EXIT_CHOICE:
            click.echo("Bye.")
            return
        try:
            ACTIONS[choice](registry, locale)
        except RegistryError as exc:
            logger.debug("Action %d failed: %s", choice, exc.code)
            click.echo(f"Error: {exc.message}")


@click.command()
@click.option(
    "--file",
    "registry_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Registry file (defaults to REGISTRY_FILE).",
)
@click.option(
    "--locale",
    type=click.Choice(sorted(SUPPORTED_LOCALES)),
    default=None,
    help="Language for animal descriptions (defaults to LOCALE).",
)
def main(registry_file: Path | None, locale: str | None) -> None:
    """Manage a registry of pets and pack animals."""
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.WARNING,
        format=LOG_FORMAT,
    )
    registry = RegistryService(registry_file or settings.REGISTRY_FILE)
    run_menu(registry, resolve_locale(locale or settings.LOCALE))


if __name__ == "__main__":
    main()
