"""Human-readable rendering of animal records and registry summaries.

Presentation only: nothing here changes stored state. Two locales are
supported, English (default) and Russian with its three-form plurals.
"""

from datetime import date

from animal_registry.models.animal import AnimalCategory, AnimalKind, AnimalRecord, CategoryCounts, age_on

SUPPORTED_LOCALES = {"en", "ru"}
DEFAULT_LOCALE = "en"

_KIND_LABELS_RU: dict[AnimalKind, str] = {
    AnimalKind.DOG: "Собака",
    AnimalKind.CAT: "Кот(кошка)",
    AnimalKind.HAMSTER: "Хомяк",
    AnimalKind.HORSE: "Лошадь",
    AnimalKind.CAMEL: "Верблюд",
    AnimalKind.DONKEY: "Осёл",
}

_MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "info": "{id}. {label} {name}, born {birth_date} ({age}), commands: {commands}",
        "age": "{years} and {months}",
        "total": "Total animals: {count}",
        "empty": "No animals registered.",
        AnimalCategory.PET: "Pets: {count}",
        AnimalCategory.PACK_ANIMAL: "Pack animals: {count}",
        AnimalKind.DOG: "Dogs: {count}",
        AnimalKind.CAT: "Cats: {count}",
        AnimalKind.HAMSTER: "Hamsters: {count}",
        AnimalKind.HORSE: "Horses: {count}",
        AnimalKind.CAMEL: "Camels: {count}",
        AnimalKind.DONKEY: "Donkeys: {count}",
    },
    "ru": {
        "info": "{id}. {label} {name}, рожд. {birth_date} ({age}), команды: {commands}",
        "age": "{years} и {months}",
        "total": "Всего животных: {count}",
        "empty": "Нет зарегистрированных животных.",
        AnimalCategory.PET: "Домашних: {count}",
        AnimalCategory.PACK_ANIMAL: "Вьючных: {count}",
        AnimalKind.DOG: "Собак: {count}",
        AnimalKind.CAT: "Кошек: {count}",
        AnimalKind.HAMSTER: "Хомяков: {count}",
        AnimalKind.HORSE: "Лошадей: {count}",
        AnimalKind.CAMEL: "Верблюдов: {count}",
        AnimalKind.DONKEY: "Ослов: {count}",
    },
}


def resolve_locale(locale: str | None) -> str:
    """Return *locale* if supported, else the default."""
    if locale and locale.lower() in SUPPORTED_LOCALES:
        return locale.lower()
    return DEFAULT_LOCALE


def plural_en(n: int, one: str, many: str) -> str:
    return one if abs(n) == 1 else many


def plural_ru(n: int, one: str, few: str, many: str) -> str:
    """Pick the Russian noun form for *n* (1 год, 2 года, 5 лет, 11 лет, 21 год)."""
    n = abs(n)
    if n % 10 == 1 and n % 100 != 11:
        return one
    if 2 <= n % 10 <= 4 and not 12 <= n % 100 <= 14:
        return few
    return many


def _years(n: int, locale: str) -> str:
    if locale == "ru":
        return f"{n} {plural_ru(n, 'год', 'года', 'лет')}"
    return f"{n} {plural_en(n, 'year', 'years')}"


def _months(n: int, locale: str) -> str:
    if locale == "ru":
        return f"{n} {plural_ru(n, 'месяц', 'месяца', 'месяцев')}"
    return f"{n} {plural_en(n, 'month', 'months')}"


def kind_label(kind: AnimalKind, locale: str = DEFAULT_LOCALE) -> str:
    if resolve_locale(locale) == "ru":
        return _KIND_LABELS_RU[kind]
    return kind.label


def format_age(birth_date: date, today: date | None = None, locale: str = DEFAULT_LOCALE) -> str:
    locale = resolve_locale(locale)
    years, months = age_on(birth_date, today)
    return _MESSAGES[locale]["age"].format(years=_years(years, locale), months=_months(months, locale))


def format_commands(commands) -> str:
    return ", ".join(commands)


def describe(record: AnimalRecord, today: date | None = None, locale: str = DEFAULT_LOCALE) -> str:
    """Render one record as a summary line with its age and commands."""
    locale = resolve_locale(locale)
    return _MESSAGES[locale]["info"].format(
        id=record.id,
        label=kind_label(record.kind, locale),
        name=record.name,
        birth_date=record.birth_date.isoformat(),
        age=format_age(record.birth_date, today, locale),
        commands=format_commands(record.commands),
    )


def format_summary(
    counts: CategoryCounts,
    animals: list[AnimalRecord],
    today: date | None = None,
    locale: str = DEFAULT_LOCALE,
) -> list[str]:
    """Render the categorized report: totals, then each non-empty category and kind with its records."""
    locale = resolve_locale(locale)
    messages = _MESSAGES[locale]
    if counts.total == 0:
        return [messages["empty"]]

    lines = [messages["total"].format(count=counts.total)]
    category_totals = {
        AnimalCategory.PET: counts.pets,
        AnimalCategory.PACK_ANIMAL: counts.pack_animals,
    }
    for category, category_count in category_totals.items():
        if not category_count:
            continue
        lines.append("  " + messages[category].format(count=category_count))
        for kind in AnimalKind:
            if kind.category is not category or not counts.by_kind.get(kind):
                continue
            lines.append("    " + messages[kind].format(count=counts.by_kind[kind]))
            lines.extend(
                "      " + describe(a, today, locale) for a in animals if a.kind is kind
            )
    return lines
