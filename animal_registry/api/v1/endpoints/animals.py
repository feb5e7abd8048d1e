"""Animal registry API endpoints."""

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from animal_registry.config import settings
from animal_registry.dependencies import get_locale
from animal_registry.errors import (
    AlreadyKnown,
    CorruptData,
    DuplicateFound,
    InvalidCommand,
    InvalidType,
    IOFailure,
    NotFound,
    RegistryError,
)
from animal_registry.models.animal import AnimalKind, AnimalRecord
from animal_registry.models.schemas import (
    Animal,
    AnimalCreateRequest,
    AnimalDetailResponse,
    AnimalListResponse,
    AnimalUpdateRequest,
    ApiErrorResponse,
    CommandListResponse,
    RegistryFileResponse,
    SummaryResponse,
    TrainRequest,
)
from animal_registry.services.formatter import describe, format_summary
from animal_registry.services.registry_service import RegistryService, get_registry

logger = logging.getLogger(__name__)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)

_ERROR_STATUS: dict[type[RegistryError], int] = {
    InvalidType: status.HTTP_400_BAD_REQUEST,
    InvalidCommand: status.HTTP_400_BAD_REQUEST,
    NotFound: status.HTTP_404_NOT_FOUND,
    DuplicateFound: status.HTTP_409_CONFLICT,
    AlreadyKnown: status.HTTP_409_CONFLICT,
    IOFailure: status.HTTP_500_INTERNAL_SERVER_ERROR,
    CorruptData: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _http_error(exc: RegistryError) -> HTTPException:
    """Translate a registry error into the API error body."""
    error = {"code": exc.code, "message": exc.message}
    if isinstance(exc, DuplicateFound):
        error["existingId"] = exc.existing.id
    status_code = _ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    return HTTPException(status_code=status_code, detail={"error": error})


def _to_schema(record: AnimalRecord, locale: str) -> Animal:
    return Animal(
        id=record.id,
        kind=record.kind,
        type_label=record.type_label,
        category=record.category,
        name=record.name,
        birth_date=record.birth_date,
        commands=list(record.commands),
        display=describe(record, date.today(), locale),
    )


def _list_response(records: list[AnimalRecord], locale: str) -> AnimalListResponse:
    data = [_to_schema(r, locale) for r in records]
    return AnimalListResponse(data=data, count=len(data))


@router.get(
    "/animals",
    response_model=AnimalListResponse,
    summary="List animals",
    description="Retrieve all animals in registry order, optionally filtered by kind.",
)
@limiter.limit(settings.RATE_LIMIT)
async def list_animals(
    request: Request,
    kind: AnimalKind | None = Query(None, description="Filter by animal kind"),
    locale: str = Depends(get_locale),
    registry: RegistryService = Depends(get_registry),
) -> AnimalListResponse:
    """Get all animals with optional kind filter."""
    if kind is not None:
        animals = registry.filter_by_kind(kind)
    else:
        animals = registry.list_animals()
    logger.info("Returning %d animals (kind filter=%s)", len(animals), kind)
    return _list_response(animals, locale)


@router.post(
    "/animals",
    response_model=AnimalDetailResponse,
    status_code=201,
    responses={409: {"model": ApiErrorResponse}},
    summary="Add an animal",
    description="Add an animal. Fails with 409 if an equivalent animal exists unless allowDuplicate is set.",
)
@limiter.limit(settings.RATE_LIMIT)
async def create_animal(
    request: Request,
    body: AnimalCreateRequest,
    locale: str = Depends(get_locale),
    registry: RegistryService = Depends(get_registry),
) -> AnimalDetailResponse:
    """Add an animal to the registry."""
    try:
        record = registry.add_animal(
            body.kind,
            body.name,
            body.birth_date,
            body.commands,
            allow_duplicate=body.allow_duplicate,
        )
    except RegistryError as exc:
        raise _http_error(exc)
    return AnimalDetailResponse(data=_to_schema(record, locale))


@router.get(
    "/animals/by-birth-date",
    response_model=AnimalListResponse,
    summary="List animals by birth date",
    description="Retrieve all animals ordered by ascending birth date (ties keep registry order).",
)
@limiter.limit(settings.RATE_LIMIT)
async def animals_by_birth_date(
    request: Request,
    locale: str = Depends(get_locale),
    registry: RegistryService = Depends(get_registry),
) -> AnimalListResponse:
    """Get all animals sorted by birth date."""
    return _list_response(registry.list_by_birth_date(), locale)


@router.get(
    "/animals/summary",
    response_model=SummaryResponse,
    summary="Categorized summary",
    description="Counts per category and kind, with localized report lines.",
)
@limiter.limit(settings.RATE_LIMIT)
async def animals_summary(
    request: Request,
    locale: str = Depends(get_locale),
    registry: RegistryService = Depends(get_registry),
) -> SummaryResponse:
    """Get the categorized registry summary."""
    counts, animals = registry.summary()
    return SummaryResponse(
        total=counts.total,
        pets=counts.pets,
        pack_animals=counts.pack_animals,
        by_kind=counts.by_kind,
        lines=format_summary(counts, animals, date.today(), locale),
    )


@router.get(
    "/animals/{animal_id}",
    response_model=AnimalDetailResponse,
    responses={404: {"model": ApiErrorResponse}},
    summary="Get animal by id",
)
@limiter.limit(settings.RATE_LIMIT)
async def animal_by_id(
    request: Request,
    animal_id: int,
    locale: str = Depends(get_locale),
    registry: RegistryService = Depends(get_registry),
) -> AnimalDetailResponse:
    """Get a specific animal by id."""
    try:
        record = registry.get_animal(animal_id)
    except RegistryError as exc:
        raise _http_error(exc)
    return AnimalDetailResponse(data=_to_schema(record, locale))


@router.put(
    "/animals/{animal_id}",
    response_model=AnimalDetailResponse,
    responses={404: {"model": ApiErrorResponse}},
    summary="Edit an animal",
    description="Replace name, birth date and the full command list. Id and kind never change.",
)
@limiter.limit(settings.RATE_LIMIT)
async def edit_animal(
    request: Request,
    animal_id: int,
    body: AnimalUpdateRequest,
    locale: str = Depends(get_locale),
    registry: RegistryService = Depends(get_registry),
) -> AnimalDetailResponse:
    """Edit an animal in place."""
    try:
        record = registry.edit(animal_id, body.name, body.birth_date, body.commands)
    except RegistryError as exc:
        raise _http_error(exc)
    return AnimalDetailResponse(data=_to_schema(record, locale))


@router.delete(
    "/animals/{animal_id}",
    status_code=204,
    responses={404: {"model": ApiErrorResponse}},
    summary="Delete an animal",
)
@limiter.limit(settings.RATE_LIMIT)
async def delete_animal(
    request: Request,
    animal_id: int,
    registry: RegistryService = Depends(get_registry),
) -> Response:
    """Delete an animal. Its id is never reused."""
    try:
        registry.remove(animal_id)
    except RegistryError as exc:
        raise _http_error(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/animals/{animal_id}/commands",
    response_model=CommandListResponse,
    responses={404: {"model": ApiErrorResponse}},
    summary="List an animal's commands",
)
@limiter.limit(settings.RATE_LIMIT)
async def animal_commands(
    request: Request,
    animal_id: int,
    registry: RegistryService = Depends(get_registry),
) -> CommandListResponse:
    """Get the commands an animal knows, in the order learned."""
    try:
        commands = registry.list_commands(animal_id)
    except RegistryError as exc:
        raise _http_error(exc)
    return CommandListResponse(id=animal_id, commands=commands)


@router.post(
    "/animals/{animal_id}/commands",
    response_model=CommandListResponse,
    status_code=201,
    responses={404: {"model": ApiErrorResponse}, 409: {"model": ApiErrorResponse}},
    summary="Train an animal",
    description="Teach a new command. Fails with 409 if the animal already knows it (case-insensitive).",
)
@limiter.limit(settings.RATE_LIMIT)
async def train_animal(
    request: Request,
    animal_id: int,
    body: TrainRequest,
    registry: RegistryService = Depends(get_registry),
) -> CommandListResponse:
    """Teach an animal a new command."""
    try:
        record = registry.train(animal_id, body.command)
    except RegistryError as exc:
        raise _http_error(exc)
    return CommandListResponse(id=record.id, commands=list(record.commands))


@router.post(
    "/registry/save",
    response_model=RegistryFileResponse,
    responses={500: {"model": ApiErrorResponse}},
    summary="Save the registry to its file",
)
@limiter.limit(settings.RATE_LIMIT)
async def save_registry(
    request: Request,
    registry: RegistryService = Depends(get_registry),
) -> RegistryFileResponse:
    """Persist the whole registry."""
    try:
        count = registry.save()
    except RegistryError as exc:
        raise _http_error(exc)
    return RegistryFileResponse(path=str(registry.path), count=count, next_id=registry.next_id)


@router.post(
    "/registry/load",
    response_model=RegistryFileResponse,
    responses={500: {"model": ApiErrorResponse}},
    summary="Load the registry from its file",
    description="Replace the in-memory registry with the file contents. Unchanged on failure.",
)
@limiter.limit(settings.RATE_LIMIT)
async def load_registry(
    request: Request,
    registry: RegistryService = Depends(get_registry),
) -> RegistryFileResponse:
    """Replace the registry with the saved one."""
    try:
        count = registry.load()
    except RegistryError as exc:
        raise _http_error(exc)
    return RegistryFileResponse(path=str(registry.path), count=count, next_id=registry.next_id)


@router.get(
    "/health",
    summary="Health check",
    description="Check that the API is running.",
)
@limiter.limit(settings.RATE_LIMIT)
async def health_check(request: Request) -> dict:
    """Health check endpoint, no auth required."""
    return {"status": "healthy"}
