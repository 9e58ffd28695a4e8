from __future__ import annotations

import asyncio

import pytest

from pycardata._constants import KEY_LISTINGS
from pycardata.fixtures import SEED_LISTINGS
from pycardata.marketplace import MarketplaceLedger, filter_by_data_type, sort_listings
from pycardata.models.marketplace import DataType, ListingDuration, ListingRecord, SortCriterion
from pycardata.storage import KeyValueStore, MemoryKeyValueStore


def _listing(listing_id: str, *, price: float = 5.0, total_sold: int = 0, shared: bool = False) -> ListingRecord:
    return ListingRecord(
        id=listing_id,
        title=f"Listing {listing_id}",
        price=price,
        data_type=DataType.SPEED,
        duration=ListingDuration.MONTHLY,
        provider="TestProvider",
        total_sold=total_sold,
        shared=shared,
    )


# ------------------------------------------------------------------
# Sorting and filtering
# ------------------------------------------------------------------


class TestSortListings:
    def test_price_ascending(self) -> None:
        listings = [_listing("1", price=5), _listing("2", price=3.5), _listing("3", price=12)]
        assert [item.price for item in sort_listings(listings, SortCriterion.PRICE)] == [3.5, 5, 12]

    def test_popular_descending(self) -> None:
        listings = [_listing("1", total_sold=136), _listing("2", total_sold=89), _listing("3", total_sold=215)]
        assert [item.total_sold for item in sort_listings(listings, "popular")] == [215, 136, 89]

    def test_recent_by_numeric_id(self) -> None:
        listings = [_listing("2"), _listing("10"), _listing("9"), _listing("x")]
        assert [item.id for item in sort_listings(listings, SortCriterion.RECENT)] == ["10", "9", "2", "x"]

    def test_ties_keep_original_order(self) -> None:
        listings = [_listing("1", price=4), _listing("2", price=4), _listing("3", price=1)]
        assert [item.id for item in sort_listings(listings, SortCriterion.PRICE)] == ["3", "1", "2"]

    def test_input_not_mutated(self) -> None:
        listings = [_listing("1", price=9), _listing("2", price=1)]
        sort_listings(listings, SortCriterion.PRICE)
        assert [item.id for item in listings] == ["1", "2"]

    def test_unknown_criterion_rejected(self) -> None:
        with pytest.raises(ValueError):
            sort_listings([], "cheapest")

    def test_static_alias(self) -> None:
        assert MarketplaceLedger.sort_by(SEED_LISTINGS, "price")[0].id == "9"


def test_filter_by_data_type() -> None:
    diagnostics = filter_by_data_type(SEED_LISTINGS, "diagnostics")
    assert [item.id for item in diagnostics] == ["4", "7", "10"]
    assert [item.id for item in filter_by_data_type(SEED_LISTINGS, DataType.FUEL)] == ["5"]


# ------------------------------------------------------------------
# Ledger persistence
# ------------------------------------------------------------------


class TestMarketplaceLedger:
    @pytest.mark.asyncio
    async def test_first_access_seeds_fixtures(self) -> None:
        store = MemoryKeyValueStore()
        ledger = MarketplaceLedger(store)

        listings = await ledger.list_all()

        assert listings == list(SEED_LISTINGS)
        assert await store.get(KEY_LISTINGS) is not None
        assert not await ledger.any_shared()

    @pytest.mark.asyncio
    async def test_set_shared_round_trip(self) -> None:
        ledger = MarketplaceLedger(MemoryKeyValueStore())

        assert await ledger.set_shared("3", True)

        listing = await ledger.get("3")
        assert listing is not None and listing.shared
        assert [item.id for item in await ledger.shared_listings()] == ["3"]
        assert await ledger.set_shared("3", False)
        assert not await ledger.any_shared()

    @pytest.mark.asyncio
    async def test_toggle_twice_restores_flag(self) -> None:
        ledger = MarketplaceLedger(MemoryKeyValueStore())

        once = await ledger.toggle_shared("2")
        twice = await ledger.toggle_shared("2")

        assert once is not None and twice is not None
        assert next(item for item in once if item.id == "2").shared is True
        assert twice == list(SEED_LISTINGS)

    @pytest.mark.asyncio
    async def test_unknown_id_leaves_catalogue_unchanged(self) -> None:
        ledger = MarketplaceLedger(MemoryKeyValueStore())

        assert await ledger.set_shared("999", True)
        assert await ledger.list_all() == list(SEED_LISTINGS)
        assert await ledger.get("999") is None

    @pytest.mark.asyncio
    async def test_existing_catalogue_not_reseeded(self) -> None:
        store = MemoryKeyValueStore()
        custom = MarketplaceLedger(store)
        await custom._repo.save([_listing("2", price=3.5)])

        assert [item.id for item in await MarketplaceLedger(store).list_all()] == ["2"]

    @pytest.mark.asyncio
    async def test_concurrent_toggles_do_not_lose_updates(self) -> None:
        ledger = MarketplaceLedger(MemoryKeyValueStore())

        await asyncio.gather(*(ledger.set_shared(str(i), True) for i in range(1, 11)))

        assert all(item.shared for item in await ledger.list_all())

    @pytest.mark.asyncio
    async def test_failing_store_falls_back(self, failing_store: KeyValueStore) -> None:
        ledger = MarketplaceLedger(failing_store)

        assert await ledger.list_all() == list(SEED_LISTINGS)
        assert await ledger.set_shared("1", True) is False
        assert await ledger.toggle_shared("1") is None


@pytest.mark.asyncio
async def test_sharing_hooks_run_after_each_change() -> None:
    ledger = MarketplaceLedger(MemoryKeyValueStore())
    seen: list[list[str]] = []

    async def record() -> None:
        seen.append([item.id for item in await ledger.shared_listings()])

    ledger.add_sharing_hook(record)
    await ledger.set_shared("4", True)
    await ledger.toggle_shared("6")
    await ledger.set_shared("4", False)

    assert seen == [["4"], ["4", "6"], ["6"]]
