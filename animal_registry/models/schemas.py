"""Pydantic request/response schemas for the registry API."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from animal_registry.models.animal import AnimalCategory, AnimalKind


class AnimalCreateRequest(BaseModel):
    """Request schema for adding an animal."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    kind: AnimalKind = Field(..., description="Animal kind")
    name: str = Field(..., min_length=1, description="Animal name")
    birth_date: date = Field(..., description="Date of birth (YYYY-MM-DD)")
    commands: list[str] = Field(default_factory=list, description="Trained commands")
    allow_duplicate: bool = Field(False, description="Add even if an equivalent animal already exists")


class AnimalUpdateRequest(BaseModel):
    """Request schema for editing an animal. Commands replace the existing list."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    name: str = Field(..., min_length=1, description="New name")
    birth_date: date = Field(..., description="New date of birth (YYYY-MM-DD)")
    commands: list[str] = Field(default_factory=list, description="New full command list")


class TrainRequest(BaseModel):
    """Request schema for teaching a command."""

    command: str = Field(..., min_length=1, description="Command to learn")


class Animal(BaseModel):
    """Schema representing a registered animal."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    id: int = Field(..., description="Registry id")
    kind: AnimalKind = Field(..., description="Animal kind")
    type_label: str = Field(..., description="Display label of the kind")
    category: AnimalCategory = Field(..., description="Pet or pack animal")
    name: str = Field(..., description="Animal name")
    birth_date: date = Field(..., description="Date of birth")
    commands: list[str] = Field(default_factory=list, description="Trained commands in insertion order")
    display: str = Field(..., description="Localized summary line")


class AnimalListResponse(BaseModel):
    """Response schema for a list of animals."""

    success: bool = True
    data: list[Animal]
    count: int


class AnimalDetailResponse(BaseModel):
    """Response schema for a single animal."""

    success: bool = True
    data: Animal


class CommandListResponse(BaseModel):
    """Response schema for an animal's commands."""

    success: bool = True
    id: int
    commands: list[str]


class SummaryResponse(BaseModel):
    """Response schema for the categorized summary."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    success: bool = True
    total: int
    pets: int
    pack_animals: int
    by_kind: dict[AnimalKind, int]
    lines: list[str] = Field(..., description="Localized report lines")


class RegistryFileResponse(BaseModel):
    """Response schema for save/load."""

    success: bool = True
    path: str
    count: int
    next_id: int = Field(..., alias="nextId")

    model_config = ConfigDict(populate_by_name=True)


class ErrorDetail(BaseModel):
    """Error detail with machine-readable code and human-readable message."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    existing_id: Optional[int] = Field(None, alias="existingId", description="Id of the equivalent animal (duplicates only)")

    model_config = ConfigDict(populate_by_name=True)


class ApiErrorResponse(BaseModel):
    """Error response format."""

    error: ErrorDetail
