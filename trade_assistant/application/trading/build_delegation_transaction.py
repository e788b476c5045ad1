"""
Use case: Build a trading-delegation transaction for the owner to sign.

Input: BuildDelegationCommand
Output: DelegationTransactionResult (wallet payload XOR error)
Side effects: Optional diagnostic module lookup (logged only).
Failure cases: BackendWalletNotConfiguredError, MissingFieldError.
"""

import logging
from typing import Optional

from trade_assistant.application.trading.dtos import (
    BuildDelegationCommand,
    DelegationTransactionResult,
)
from trade_assistant.domain.trading.delegation_builder import build_delegation_payload
from trade_assistant.domain.trading.encoding import ArgumentEncoding
from trade_assistant.domain.trading.errors import (
    BackendWalletNotConfiguredError,
    TradingDomainError,
)
from trade_assistant.domain.trading.move_functions import (
    DELEGATE_TRADING_TO_FOR_SUBACCOUNT,
)
from trade_assistant.domain.trading.ports import ModuleInspector, TransactionSigner

logger = logging.getLogger(__name__)


class BuildDelegationTransactionUseCase:
    """Builds a ``delegate_trading_to_for_subaccount`` payload.

    The delegate is always the custody signer's address, so the custody
    path can later place orders for the subaccount.
    """

    def __init__(
        self,
        signer: Optional[TransactionSigner],
        package_address: str,
        inspector: Optional[ModuleInspector] = None,
    ) -> None:
        self._signer = signer
        self._package_address = package_address
        self._inspector = inspector

    async def execute(self, command: BuildDelegationCommand) -> DelegationTransactionResult:
        """Run the build-delegation use case.

        Args:
            command: Owner, subaccount and optional expiration.

        Returns:
            The wallet payload and delegate address, or the domain error.
        """
        if self._signer is None:
            return DelegationTransactionResult(error=BackendWalletNotConfiguredError())

        delegate_address = self._signer.address
        logger.info(
            "Building delegation subaccount=%s delegate=%s owner=%s",
            command.subaccount_address,
            delegate_address,
            command.owner_address,
        )

        try:
            payload = build_delegation_payload(
                subaccount_address=command.subaccount_address,
                delegate_address=delegate_address,
                package_address=self._package_address,
                expiration_secs=command.expiration_secs,
                encoding=ArgumentEncoding.WALLET,
            )
        except TradingDomainError as exc:
            return DelegationTransactionResult(
                delegate_address=delegate_address, error=exc
            )

        if self._inspector is not None:
            try:
                await self._inspector.inspect_function(
                    DELEGATE_TRADING_TO_FOR_SUBACCOUNT.module,
                    DELEGATE_TRADING_TO_FOR_SUBACCOUNT.name,
                )
            except Exception:
                logger.warning("Module inspection failed; continuing", exc_info=True)

        return DelegationTransactionResult(
            transaction=payload.to_wallet_dict(),
            delegate_address=delegate_address,
        )
