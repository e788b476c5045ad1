"""
``delegate_trading_to_for_subaccount`` payload assembly.

Grants ``delegate_address`` permission to place orders for a subaccount,
optionally until a unix expiration timestamp. Pure; no IO.
"""

from typing import Optional

from trade_assistant.domain.trading.encoding import ArgumentEncoding, encode_optional
from trade_assistant.domain.trading.entities import TransactionPayload
from trade_assistant.domain.trading.errors import MissingFieldError
from trade_assistant.domain.trading.move_functions import (
    DELEGATE_TRADING_TO_FOR_SUBACCOUNT,
)


def build_delegation_payload(
    subaccount_address: str,
    delegate_address: str,
    package_address: str,
    expiration_secs: Optional[int] = None,
    encoding: ArgumentEncoding = ArgumentEncoding.WALLET,
) -> TransactionPayload:
    """Assemble the delegation call with exactly three arguments.

    Raises:
        MissingFieldError: If either address is blank.
    """
    if not subaccount_address:
        raise MissingFieldError("subaccount_address")
    if not delegate_address:
        raise MissingFieldError("delegate_address")

    return TransactionPayload(
        function=DELEGATE_TRADING_TO_FOR_SUBACCOUNT.function_id(package_address),
        type_arguments=[],
        function_arguments=[
            subaccount_address,
            delegate_address,
            encode_optional(expiration_secs, encoding),
        ],
    )
