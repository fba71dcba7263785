"""Bundles — plugins that contribute one routable entity class each.

A bundle names the entity class, how it maps onto URLs, and where its
entities come from. The repository may be given directly or as a
factory that receives the kernel's database (``None`` when the kernel
has none)::

    products = Bundle(
        "product",
        Product,
        RouteConfig(field="slug", prefix="/products"),
        lambda db: SQLRepository(db, Product, "products"),
    )
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from storefront._internal.invoke import invoke
from storefront.data.database import Database
from storefront.data.repository import Repository
from storefront.errors import ConfigurationError
from storefront.routing.route import RouteConfig

type RepositoryFactory = Callable[[Database | None], Any]


@dataclass(frozen=True, slots=True)
class Bundle:
    name: str
    entity: type
    route: RouteConfig
    repository: Repository[Any] | RepositoryFactory

    async def build_repository(self, db: Database | None) -> Repository[Any]:
        """Return the bundle's repository, calling the factory if one was given.

        Factories may be sync or async.
        """
        if isinstance(self.repository, Repository):
            return self.repository
        if not callable(self.repository):
            msg = f"Bundle {self.name!r}: repository must be a Repository or a factory"
            raise ConfigurationError(msg)
        return await invoke(self.repository, db)
