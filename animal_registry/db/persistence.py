"""Data access layer for saving and loading the registry as a JSON file.

The whole collection is written as one document, ``{"animals": [...]}``.
Saves go to a temporary file in the target directory and are moved into
place with ``os.replace``, so a failed save never leaves a partial file.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from animal_registry.errors import CorruptData, IOFailure
from animal_registry.models.animal import AnimalRecord

logger = logging.getLogger(__name__)


class RegistrySnapshot(BaseModel):
    """On-disk shape of the registry file."""

    animals: list[AnimalRecord] = Field(default_factory=list)


def save_registry(animals: list[AnimalRecord], path: Path) -> None:
    """Write all *animals* to *path* in one unit. Raises ``IOFailure``."""
    path = Path(path)
    payload = RegistrySnapshot(animals=animals).model_dump_json(indent=2)
    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        logger.error("Failed to save registry to %s: %s", path, e)
        raise IOFailure(f"Could not save registry to {path}: {e}") from e
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                logger.warning("Could not remove temporary file %s", tmp_name)
    logger.info("Saved %d animals to %s", len(animals), path)


def load_registry(path: Path) -> list[AnimalRecord]:
    """Read all animals from *path*.

    Raises ``IOFailure`` when the file is missing or unreadable and
    ``CorruptData`` when its content is not a valid registry document.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = f.read()
    except UnicodeDecodeError as e:
        logger.error("Registry file %s is not UTF-8 text: %s", path, e)
        raise CorruptData(f"Registry file {path} is not valid text") from e
    except FileNotFoundError as e:
        logger.error("Registry file not found: %s", path)
        raise IOFailure(f"Registry file {path} not found") from e
    except OSError as e:
        logger.error("Failed to read registry file %s: %s", path, e)
        raise IOFailure(f"Could not read registry file {path}: {e}") from e

    # ValueError covers JSONDecodeError and the int digit limit.
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError) as e:
        logger.error("Invalid JSON in registry file %s: %s", path, e)
        raise CorruptData(f"Registry file {path} is not valid JSON") from e

    try:
        snapshot = RegistrySnapshot.model_validate(data)
    except ValidationError as e:
        logger.error("Unexpected record shape in registry file %s: %s", path, e)
        raise CorruptData(f"Registry file {path} does not contain valid animal records") from e

    logger.info("Loaded %d animals from %s", len(snapshot.animals), path)
    return snapshot.animals
