"""Storefront entities.

Routable entities (``Product``, ``Taxon``) are frozen dataclasses so the
data layer can map rows onto them directly. ``Reviewer`` is edited in
place by the review forms and stays mutable.
"""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class Product:
    id: int
    code: str
    name: str
    slug: str


@dataclass(frozen=True, slots=True)
class Taxon:
    """A catalog category, addressed by its full permalink (``clothing/t-shirts``)."""

    id: int
    code: str
    name: str
    permalink: str


@dataclass(frozen=True, slots=True)
class Currency:
    code: str


@dataclass(frozen=True, slots=True)
class Channel:
    """A sales channel (web store, marketplace, ...) with its base currency."""

    code: str
    name: str
    base_currency: Currency


@runtime_checkable
class ReviewerInterface(Protocol):
    """Anyone who can author a review."""

    email: str | None
    first_name: str | None
    last_name: str | None


@dataclass(slots=True)
class Reviewer:
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)
