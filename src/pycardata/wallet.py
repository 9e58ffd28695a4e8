"""Wallet state and simulated earnings.

``sharing_active`` is derived from the catalogue ("any listing
shared").  The simulator registers itself as the ledger's sharing hook,
so every listing change re-reads the catalogue under the wallet key
lock and re-persists the flag.  Wallet saves derive it the same way;
a caller-supplied value is never stored.  The listings lock is
released before the hook takes the wallet lock, so the two never nest.
"""

from __future__ import annotations

import logging
import random

from pydantic import TypeAdapter

from pycardata._constants import EARNINGS_MAX_FACTOR, EARNINGS_MIN_FACTOR, KEY_USER_WALLET
from pycardata.exceptions import StoreError
from pycardata.fixtures import SEED_WALLET
from pycardata.marketplace import MarketplaceLedger
from pycardata.models.wallet import WalletState
from pycardata.storage import JsonRepository, KeyLocks, KeyValueStore

_logger = logging.getLogger(__name__)

_WALLET_ADAPTER: TypeAdapter[WalletState] = TypeAdapter(WalletState)


class WalletSimulator:
    """Wallet persistence plus the earnings simulation.

    Parameters
    ----------
    store : KeyValueStore
        Persistent store holding ``user_wallet``.
    ledger : MarketplaceLedger
        Catalogue whose shared listings generate earnings.
    locks : KeyLocks or None
        Per-key locks shared with *ledger*.
    rng : random.Random or None
        Source of the per-listing payout factor.
    min_factor, max_factor : float
        Bounds of the uniform payout factor applied to each listing's
        daily rate.
    """

    def __init__(
        self,
        store: KeyValueStore,
        ledger: MarketplaceLedger,
        locks: KeyLocks | None = None,
        *,
        rng: random.Random | None = None,
        min_factor: float = EARNINGS_MIN_FACTOR,
        max_factor: float = EARNINGS_MAX_FACTOR,
    ) -> None:
        if not 0 <= min_factor <= max_factor:
            raise ValueError(f"payout factors must satisfy 0 <= min <= max, got {min_factor} / {max_factor}")
        self._repo = JsonRepository(store, KEY_USER_WALLET, _WALLET_ADAPTER)
        self._ledger = ledger
        self._locks = locks if locks is not None else KeyLocks()
        self._rng = rng if rng is not None else random.Random()
        self._min_factor = min_factor
        self._max_factor = max_factor
        ledger.add_sharing_hook(self.sync_sharing)

    async def load(self) -> WalletState:
        """Return the stored wallet, seeding the fixture if absent.

        Raises :class:`~pycardata.exceptions.StoreError` on store failure.
        """
        wallet = await self._repo.load()
        if wallet is None:
            wallet = SEED_WALLET
            await self._repo.save(wallet)
            _logger.debug("Seeded wallet %s", wallet.address)
        return wallet

    async def get_wallet(self) -> WalletState:
        try:
            return await self.load()
        except StoreError:
            _logger.warning("Error retrieving wallet; using fixture", exc_info=True)
            return SEED_WALLET

    async def _derived_sharing(self) -> bool:
        return any(listing.shared for listing in await self._ledger.load())

    async def save(self, wallet: WalletState) -> None:
        """Persist *wallet*, replacing ``sharing_active`` with the catalogue's value."""
        async with self._locks(KEY_USER_WALLET):
            sharing_active = await self._derived_sharing()
            await self._repo.save(wallet.model_copy(update={"sharing_active": sharing_active}))

    async def update_wallet(self, wallet: WalletState) -> bool:
        try:
            await self.save(wallet)
        except StoreError:
            _logger.warning("Error updating wallet", exc_info=True)
            return False
        return True

    async def sync_sharing(self) -> bool:
        """Re-derive ``sharing_active`` from the catalogue and persist it.

        Registered as the ledger's sharing hook, so every listing change
        ends here.  Raises :class:`~pycardata.exceptions.StoreError` on
        persistence failure.
        """
        async with self._locks(KEY_USER_WALLET):
            sharing_active = await self._derived_sharing()
            wallet = await self.load()
            if wallet.sharing_active != sharing_active:
                await self._repo.save(wallet.model_copy(update={"sharing_active": sharing_active}))
        return sharing_active

    async def apply_sharing_toggle(self, listing_id: str) -> bool:
        """Flip one listing and return the re-derived ``sharing_active``.

        Raises :class:`~pycardata.exceptions.StoreError` on persistence
        failure.
        """
        await self._ledger.update_shared(listing_id)
        sharing_active = await self.sync_sharing()
        _logger.debug("Listing %r toggled; sharing active: %s", listing_id, sharing_active)
        return sharing_active

    async def toggle_sharing(self, listing_id: str) -> bool:
        """Flip one listing; return the new aggregate flag (``False`` on failure)."""
        try:
            return await self.apply_sharing_toggle(listing_id)
        except StoreError:
            _logger.warning("Error toggling data sharing for %r", listing_id, exc_info=True)
            return False

    async def credit_earnings(self) -> float:
        """Credit one simulated payout; raises on store failure."""
        async with self._locks(KEY_USER_WALLET):
            wallet = await self.load()
            if not wallet.sharing_active:
                return 0.0

            total = 0.0
            for listing in await self._ledger.load():
                if listing.shared:
                    total += listing.daily_rate * self._rng.uniform(self._min_factor, self._max_factor)

            await self._repo.save(wallet.credit(total))
        _logger.debug("Credited %.4f to %s", total, wallet.address)
        return total

    async def simulate_earnings(self) -> float:
        """Credit one simulated payout for every shared listing.

        Returns the amount earned, ``0.0`` when nothing is shared or the
        store fails.
        """
        try:
            return await self.credit_earnings()
        except StoreError:
            _logger.warning("Error simulating earnings", exc_info=True)
            return 0.0

    async def projected_daily_earnings(self) -> tuple[float, float]:
        """Range of the next simulated payout for the current catalogue."""
        wallet = await self.get_wallet()
        if not wallet.sharing_active:
            return (0.0, 0.0)
        daily = sum(listing.daily_rate for listing in await self._ledger.shared_listings())
        return (daily * self._min_factor, daily * self._max_factor)
