"""Jinja2 renderer for the generated client driver.

The driver is a small Python module with the deployment's URL baked in, so
a caller can download it and talk to this service without configuration.
"""

from jinja2 import TemplateSyntaxError, UndefinedError
from jinja2.sandbox import SandboxedEnvironment

from sheetdb.core.logging import get_logger

logger = get_logger(__name__)

DRIVER_TEMPLATE = '''r"""SheetDB client driver for {{ service_url | replace('"', '%22') }}.

Generated by the SheetDB deployment at that URL. Requires the ``sheetdb``
package installed.

Example:
    import asyncio

    from sheetdb_driver import db

    async def main():
        users = db.collection("users")
        await users.insert_one({"name": "Ada", "age": 36})
        print(await users.find({"age": {"$gt": 30}}, sort={"age": -1}))

    asyncio.run(main())
"""

from sheetdb.client import Collection, RemoteDocument, SheetDB, SheetDBClientError

SERVICE_URL = {{ service_url | tojson }}

db = SheetDB(SERVICE_URL)

__all__ = [
    "Collection",
    "RemoteDocument",
    "SERVICE_URL",
    "SheetDB",
    "SheetDBClientError",
    "db",
]
'''


class DriverRenderer:
    """Renders the client driver source.

    Uses a sandboxed environment; the only variable is the service URL.
    Autoescaping is off because the output is Python, not HTML.
    """

    def __init__(self, template: str = DRIVER_TEMPLATE) -> None:
        self.env = SandboxedEnvironment(
            autoescape=False,
            keep_trailing_newline=True,
        )
        self.template = template

    def render(self, service_url: str) -> str:
        """Render the driver for a deployment URL.

        Args:
            service_url: Public URL the driver should call.

        Returns:
            Python source of the driver module.
        """
        try:
            rendered = self.env.from_string(self.template).render(service_url=service_url)
            logger.debug("Driver rendered", service_url=service_url)
            return rendered
        except TemplateSyntaxError as e:
            logger.error("Driver template syntax error", error=str(e), line=e.lineno)
            raise
        except UndefinedError as e:
            logger.error("Undefined variable in driver template", error=str(e))
            raise


# Global driver renderer instance
_driver_renderer: DriverRenderer | None = None


def get_driver_renderer() -> DriverRenderer:
    """Get the global driver renderer instance."""
    global _driver_renderer
    if _driver_renderer is None:
        _driver_renderer = DriverRenderer()
    return _driver_renderer
