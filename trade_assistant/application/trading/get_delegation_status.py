"""
Use cases: Custody delegate address and delegation status.

GetDelegateAddressUseCase
    Output: custody address or None. No side effects.

GetDelegationStatusUseCase
    Input: owner wallet address
    Output: DelegationStatusResult
    Side effects: None (read-only exchange lookups).
    Failure cases: BackendWalletNotConfiguredError, ExchangeRequestError.
"""

import logging
from typing import Optional

from trade_assistant.application.trading.dtos import (
    DelegationItem,
    DelegationStatusResult,
)
from trade_assistant.application.trading.order_preparation import (
    pick_primary_subaccount,
)
from trade_assistant.domain.trading.errors import (
    BackendWalletNotConfiguredError,
    TradingDomainError,
)
from trade_assistant.domain.trading.ports import AccountDataPort, TransactionSigner

logger = logging.getLogger(__name__)


class GetDelegateAddressUseCase:
    """Returns the address orders are delegated to, if a custody key exists."""

    def __init__(self, signer: Optional[TransactionSigner]) -> None:
        self._signer = signer

    def execute(self) -> Optional[str]:
        return self._signer.address if self._signer is not None else None


class GetDelegationStatusUseCase:
    """Checks whether the owner's primary subaccount delegates to the backend.

    Grant state is always read fresh from the exchange; nothing is cached.
    """

    def __init__(
        self,
        account_port: AccountDataPort,
        signer: Optional[TransactionSigner],
    ) -> None:
        self._account_port = account_port
        self._signer = signer

    async def execute(self, owner_address: str) -> DelegationStatusResult:
        """Run the delegation status use case.

        Args:
            owner_address: Wallet address of the caller.

        Returns:
            The delegation status, or the domain error.
        """
        try:
            subaccount = pick_primary_subaccount(
                await self._account_port.get_subaccounts(owner_address)
            )
            if subaccount is None:
                return DelegationStatusResult(is_delegated=False, has_subaccount=False)

            if self._signer is None:
                raise BackendWalletNotConfiguredError()
            delegate_address = self._signer.address

            delegations = await self._account_port.get_delegations(subaccount.address)
        except TradingDomainError as exc:
            logger.warning("Delegation status failed owner=%s: %s", owner_address, exc.message)
            return DelegationStatusResult(is_delegated=False, has_subaccount=False, error=exc)

        is_delegated = any(
            d.delegated_account.lower() == delegate_address.lower() for d in delegations
        )
        logger.info(
            "Delegation status subaccount=%s delegated=%s", subaccount.address, is_delegated
        )

        return DelegationStatusResult(
            is_delegated=is_delegated,
            has_subaccount=True,
            subaccount_address=subaccount.address,
            delegate_address=delegate_address,
            delegations=[
                DelegationItem(
                    delegated_account=d.delegated_account,
                    expiration_time_s=d.expiration_time_s,
                    permission_type=d.permission_type,
                )
                for d in delegations
            ],
        )
