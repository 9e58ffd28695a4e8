"""Marketplace listing catalogue.

The catalogue is persisted as one whole collection under
``marketplace_listings``; every change is a read-modify-write of the
entire list, serialized per key through :class:`KeyLocks`.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import Any

from pydantic import TypeAdapter

from pycardata._constants import KEY_LISTINGS
from pycardata.exceptions import StoreError
from pycardata.fixtures import SEED_LISTINGS
from pycardata.models.marketplace import DataType, ListingRecord, SortCriterion
from pycardata.storage import JsonRepository, KeyLocks, KeyValueStore

_logger = logging.getLogger(__name__)

_LISTINGS_ADAPTER: TypeAdapter[list[ListingRecord]] = TypeAdapter(list[ListingRecord])

SharingHook = Callable[[], Awaitable[object]]

_SORT_KEYS: dict[SortCriterion, tuple[Callable[[ListingRecord], Any], bool]] = {
    SortCriterion.RECENT: (lambda listing: listing.recency_key, True),
    SortCriterion.POPULAR: (lambda listing: listing.total_sold, True),
    SortCriterion.PRICE: (lambda listing: listing.price, False),
}


def sort_listings(listings: Iterable[ListingRecord], criterion: SortCriterion | str) -> list[ListingRecord]:
    """Return a reordered copy of *listings*.

    ``recent`` orders by descending numeric id, ``popular`` by
    descending ``total_sold`` and ``price`` by ascending price.  Ties
    keep their original relative order.

    Raises
    ------
    ValueError
        If *criterion* is not a known sort criterion.
    """
    key, descending = _SORT_KEYS[SortCriterion(criterion)]
    return sorted(listings, key=key, reverse=descending)


def filter_by_data_type(listings: Iterable[ListingRecord], data_type: DataType | str) -> list[ListingRecord]:
    wanted = DataType(data_type)
    return [listing for listing in listings if listing.data_type == wanted]


def _flip(listings: Sequence[ListingRecord], listing_id: str, shared: bool | None) -> list[ListingRecord]:
    """Map over the catalogue updating the matching listing; unknown ids match nothing."""
    updated: list[ListingRecord] = []
    for listing in listings:
        if listing.id == listing_id:
            value = (not listing.shared) if shared is None else shared
            listing = listing.model_copy(update={"shared": value})
        updated.append(listing)
    return updated


class MarketplaceLedger:
    """Catalogue of listings and their per-listing sharing flag.

    Coroutines registered with :meth:`add_sharing_hook` run after every
    persisted sharing change, once the listings lock is released.
    """

    def __init__(self, store: KeyValueStore, locks: KeyLocks | None = None) -> None:
        self._repo = JsonRepository(store, KEY_LISTINGS, _LISTINGS_ADAPTER)
        self._locks = locks if locks is not None else KeyLocks()
        self._sharing_hooks: list[SharingHook] = []

    def add_sharing_hook(self, hook: SharingHook) -> None:
        self._sharing_hooks.append(hook)

    async def load(self) -> list[ListingRecord]:
        """Return the stored catalogue, seeding the fixtures if absent.

        Raises :class:`~pycardata.exceptions.StoreError` when the store
        cannot be read or written.
        """
        listings = await self._repo.load()
        if listings is None:
            listings = list(SEED_LISTINGS)
            await self._repo.save(listings)
            _logger.debug("Seeded %d marketplace listings", len(listings))
        return listings

    async def list_all(self) -> list[ListingRecord]:
        """Return the catalogue, falling back to the fixtures if the store fails."""
        try:
            return await self.load()
        except StoreError:
            _logger.warning("Error retrieving marketplace listings; using fixtures", exc_info=True)
            return list(SEED_LISTINGS)

    async def get(self, listing_id: str) -> ListingRecord | None:
        for listing in await self.list_all():
            if listing.id == listing_id:
                return listing
        return None

    async def shared_listings(self) -> list[ListingRecord]:
        return [listing for listing in await self.list_all() if listing.shared]

    async def any_shared(self) -> bool:
        return any(listing.shared for listing in await self.list_all())

    async def update_shared(self, listing_id: str, shared: bool | None = None) -> list[ListingRecord]:
        """Set (or flip, when *shared* is ``None``) one listing's flag.

        Returns the updated catalogue.  Raises
        :class:`~pycardata.exceptions.StoreError` on persistence failure.
        """
        async with self._locks(KEY_LISTINGS):
            listings = await self.load()
            updated = _flip(listings, listing_id, shared)
            await self._repo.save(updated)
        if not any(listing.id == listing_id for listing in updated):
            _logger.debug("No listing with id %r; catalogue unchanged", listing_id)
        for hook in self._sharing_hooks:
            await hook()
        return updated

    async def set_shared(self, listing_id: str, shared: bool) -> bool:
        """Set one listing's flag; ``False`` only when persistence fails."""
        try:
            await self.update_shared(listing_id, shared)
        except StoreError:
            _logger.warning("Error updating sharing for listing %r", listing_id, exc_info=True)
            return False
        return True

    async def toggle_shared(self, listing_id: str) -> list[ListingRecord] | None:
        """Flip one listing's flag; ``None`` when persistence fails."""
        try:
            return await self.update_shared(listing_id)
        except StoreError:
            _logger.warning("Error toggling sharing for listing %r", listing_id, exc_info=True)
            return None

    @staticmethod
    def sort_by(listings: Iterable[ListingRecord], criterion: SortCriterion | str) -> list[ListingRecord]:
        return sort_listings(listings, criterion)
