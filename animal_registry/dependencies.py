"""Shared FastAPI dependencies."""

import logging

from fastapi import Header

from animal_registry.config import settings
from animal_registry.services.formatter import SUPPORTED_LOCALES, resolve_locale

logger = logging.getLogger(__name__)


async def get_locale(accept_language: str | None = Header(None)) -> str:
    """Extract locale from Accept-Language header, defaulting to the configured locale."""
    if accept_language:
        lang = accept_language.strip().split(",")[0].split("-")[0].lower()
        if lang in SUPPORTED_LOCALES:
            return lang
    return resolve_locale(settings.LOCALE)
