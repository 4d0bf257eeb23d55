"""Shared API dependencies."""

from fastapi import Depends

from recipe_clipper.config import Settings, settings
from recipe_clipper.services.scrape_service import ScrapeService


def get_settings() -> Settings:
    """Get the process-wide settings (overridable in tests)."""
    return settings


def get_scrape_service(app_settings: Settings = Depends(get_settings)) -> ScrapeService:
    """Get scrape service instance."""
    return ScrapeService(app_settings)
