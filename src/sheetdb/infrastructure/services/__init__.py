"""Infrastructure services."""

from sheetdb.infrastructure.services.driver_renderer import DriverRenderer, get_driver_renderer

__all__ = ["DriverRenderer", "get_driver_renderer"]
