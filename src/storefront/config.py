"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation, no string-key
dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Storefront configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(locales=("en", "fr"), route_collection_limit=50)
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    # Locales
    default_locale: str = "en"
    locales: tuple[str, ...] = ("en",)

    # Slug routing: max entities per class when listing all routes.
    # None or 0 means no limit.
    route_collection_limit: int | None = None

    # Database
    database_url: str | None = None
    db_echo: bool = False
