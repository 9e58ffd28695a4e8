from __future__ import annotations

import random

import pytest

from pycardata._constants import KEY_USER_WALLET
from pycardata.fixtures import SEED_WALLET
from pycardata.marketplace import MarketplaceLedger
from pycardata.models.wallet import WalletState
from pycardata.storage import KeyLocks, KeyValueStore, MemoryKeyValueStore
from pycardata.wallet import WalletSimulator


def _simulator(
    store: KeyValueStore | None = None,
    *,
    min_factor: float = 0.5,
    max_factor: float = 1.0,
    seed: int = 1,
) -> WalletSimulator:
    store = store if store is not None else MemoryKeyValueStore()
    locks = KeyLocks()
    return WalletSimulator(
        store,
        MarketplaceLedger(store, locks),
        locks,
        rng=random.Random(seed),
        min_factor=min_factor,
        max_factor=max_factor,
    )


@pytest.mark.asyncio
async def test_first_access_seeds_wallet() -> None:
    store = MemoryKeyValueStore()
    wallet = await _simulator(store).get_wallet()

    assert wallet == SEED_WALLET
    assert await store.get(KEY_USER_WALLET) is not None


@pytest.mark.asyncio
async def test_update_wallet_replaces_stored_value() -> None:
    simulator = _simulator()
    replacement = WalletState(address="0xfeed", balance=1.0, earnings=1.0)

    assert await simulator.update_wallet(replacement)
    assert await simulator.get_wallet() == replacement


@pytest.mark.asyncio
async def test_sharing_active_tracks_any_shared_listing() -> None:
    simulator = _simulator()

    assert await simulator.toggle_sharing("1") is True
    assert (await simulator.get_wallet()).sharing_active is True

    assert await simulator.toggle_sharing("4") is True
    assert await simulator.toggle_sharing("1") is True
    assert (await simulator.get_wallet()).sharing_active is True

    assert await simulator.toggle_sharing("4") is False
    assert (await simulator.get_wallet()).sharing_active is False


@pytest.mark.asyncio
async def test_toggle_preserves_balances() -> None:
    simulator = _simulator()
    await simulator.toggle_sharing("2")

    wallet = await simulator.get_wallet()
    assert wallet.balance == SEED_WALLET.balance
    assert wallet.earnings == SEED_WALLET.earnings


@pytest.mark.asyncio
async def test_no_earnings_without_sharing() -> None:
    simulator = _simulator()

    assert await simulator.simulate_earnings() == 0.0
    assert await simulator.get_wallet() == SEED_WALLET
    assert await simulator.projected_daily_earnings() == (0.0, 0.0)


@pytest.mark.asyncio
async def test_earnings_credit_balance_and_earnings_equally() -> None:
    simulator = _simulator()
    await simulator.toggle_sharing("3")
    before = await simulator.get_wallet()

    earned = await simulator.simulate_earnings()
    after = await simulator.get_wallet()

    assert earned > 0
    assert after.balance - before.balance == pytest.approx(earned)
    assert after.earnings - before.earnings == pytest.approx(earned)
    assert after.sharing_active is True


@pytest.mark.asyncio
@pytest.mark.parametrize("seed", range(10))
async def test_payout_within_factor_bounds(seed: int) -> None:
    simulator = _simulator(seed=seed)
    await simulator.toggle_sharing("3")
    await simulator.toggle_sharing("2")
    daily = 12 / 30 + 3.5 / 30

    earned = await simulator.simulate_earnings()

    assert daily * 0.5 <= earned <= daily * 1.0


@pytest.mark.asyncio
async def test_fixed_factor_pays_daily_rate() -> None:
    simulator = _simulator(min_factor=1.0, max_factor=1.0)
    await simulator.toggle_sharing("1")

    assert await simulator.simulate_earnings() == pytest.approx(5 / 30)
    assert await simulator.projected_daily_earnings() == (pytest.approx(5 / 30), pytest.approx(5 / 30))


@pytest.mark.asyncio
async def test_failing_store_degrades(failing_store: KeyValueStore) -> None:
    simulator = _simulator(failing_store)

    assert await simulator.get_wallet() == SEED_WALLET
    assert await simulator.update_wallet(SEED_WALLET) is False
    assert await simulator.toggle_sharing("1") is False
    assert await simulator.simulate_earnings() == 0.0


def test_invalid_factors_rejected() -> None:
    with pytest.raises(ValueError):
        _simulator(min_factor=1.0, max_factor=0.5)


@pytest.mark.asyncio
async def test_ledger_changes_rederive_sharing_flag() -> None:
    store = MemoryKeyValueStore()
    locks = KeyLocks()
    ledger = MarketplaceLedger(store, locks)
    simulator = WalletSimulator(store, ledger, locks, rng=random.Random(3))

    assert await ledger.set_shared("3", True)
    assert (await simulator.get_wallet()).sharing_active is True
    assert await simulator.simulate_earnings() > 0

    assert await ledger.toggle_shared("3") is not None
    assert (await simulator.get_wallet()).sharing_active is False


@pytest.mark.asyncio
async def test_update_wallet_ignores_supplied_sharing_flag() -> None:
    simulator = _simulator()

    assert await simulator.update_wallet(SEED_WALLET.model_copy(update={"sharing_active": True}))
    assert (await simulator.get_wallet()).sharing_active is False

    await simulator.toggle_sharing("5")
    assert await simulator.update_wallet(WalletState(address="0xfeed", sharing_active=False))
    wallet = await simulator.get_wallet()
    assert wallet.address == "0xfeed"
    assert wallet.sharing_active is True
