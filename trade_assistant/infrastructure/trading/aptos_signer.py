"""
Adapter: Aptos custody signer.

Implements TransactionSigner with ``aptos-sdk``. Holds exactly one
Ed25519 account, read-only after construction, and walks each call
through Unsigned -> Signed -> Submitted -> Confirmed | Failed.

Payload arguments must be CHAIN_CLIENT-encoded (options as ``[]`` or
``[v]``); each one is BCS-serialised according to the declared parameter
type of the target entry function.
"""

import logging
from typing import Any, Callable, Optional

import httpx
from aptos_sdk.account import Account
from aptos_sdk.account_address import AccountAddress
from aptos_sdk.async_client import ApiError, ClientConfig, RestClient
from aptos_sdk.bcs import Serializer
from aptos_sdk.transactions import EntryFunction as BcsEntryFunction
from aptos_sdk.transactions import TransactionArgument
from aptos_sdk.transactions import TransactionPayload as BcsTransactionPayload

from trade_assistant.domain.trading.entities import (
    TransactionPayload,
    TransactionReceipt,
    TransactionState,
)
from trade_assistant.domain.trading.errors import TransactionFailedError
from trade_assistant.domain.trading.move_functions import ENTRY_FUNCTIONS, EntryFunction
from trade_assistant.domain.trading.ports import TransactionSigner

logger = logging.getLogger(__name__)

OPTION_PREFIX = "0x1::option::Option<"
PRIVATE_KEY_PREFIXES = ("ed25519-priv-",)


def _address(value: Any) -> AccountAddress:
    if isinstance(value, AccountAddress):
        return value
    return AccountAddress.from_str_relaxed(str(value))


# Move type -> (value converter, BCS encoder)
_SCALAR_ENCODERS: dict[str, tuple[Callable[[Any], Any], Callable]] = {
    "address": (_address, Serializer.struct),
    "bool": (bool, Serializer.bool),
    "u8": (int, Serializer.u8),
    "u64": (int, Serializer.u64),
    "0x1::string::String": (str, Serializer.str),
}


def to_transaction_argument(move_type: str, value: Any) -> TransactionArgument:
    """BCS-encode one argument according to its declared Move type."""
    if move_type.startswith(OPTION_PREFIX):
        inner_type = move_type[len(OPTION_PREFIX):-1]
        convert, encoder = _SCALAR_ENCODERS[inner_type]
        return TransactionArgument(
            [convert(v) for v in value], Serializer.sequence_serializer(encoder)
        )
    convert, encoder = _SCALAR_ENCODERS[move_type]
    return TransactionArgument(convert(value), encoder)


def _entry_function_for(payload: TransactionPayload) -> tuple[str, EntryFunction]:
    module_id, _, name = payload.function.rpartition("::")
    try:
        return module_id, ENTRY_FUNCTIONS[name]
    except KeyError:
        raise TransactionFailedError(f"unknown entry function {payload.function}") from None


def to_bcs_payload(payload: TransactionPayload) -> BcsTransactionPayload:
    """Translate a CHAIN_CLIENT-encoded payload into an aptos-sdk payload."""
    module_id, function = _entry_function_for(payload)
    if len(payload.function_arguments) != function.arity:
        raise TransactionFailedError(
            f"{function.name} expects {function.arity} arguments, "
            f"got {len(payload.function_arguments)}"
        )
    arguments = [
        to_transaction_argument(move_type, value)
        for move_type, value in zip(function.parameter_types, payload.function_arguments)
    ]
    return BcsTransactionPayload(
        BcsEntryFunction.natural(module_id, function.name, [], arguments)
    )


def _extract_order_id(transaction: dict[str, Any]) -> Optional[str]:
    for event in transaction.get("events") or []:
        if "order" not in (event.get("type") or "").lower():
            continue
        order_id = (event.get("data") or {}).get("order_id")
        if order_id is not None:
            return str(order_id)
    return None


def load_account(private_key: str) -> Account:
    """Load an Ed25519 account from a hex key (``0x`` or AIP-80 prefix allowed)."""
    key = private_key.strip()
    for prefix in PRIVATE_KEY_PREFIXES:
        if key.startswith(prefix):
            key = key[len(prefix):]
    return Account.load_key(key)


class AptosCustodySigner(TransactionSigner):
    """Signs and submits entry-function calls with one custody account.

    Args:
        rest_client: aptos-sdk async REST client for the target network.
        account: The custody account.
    """

    def __init__(self, rest_client: RestClient, account: Account) -> None:
        self._rest_client = rest_client
        self._account = account
        self._address = str(account.address())

    @classmethod
    def from_private_key(
        cls,
        private_key: str,
        fullnode_url: str,
        node_api_key: Optional[str] = None,
    ) -> "AptosCustodySigner":
        """Build a signer and its REST client from configuration values."""
        rest_client = RestClient(fullnode_url, ClientConfig(api_key=node_api_key))
        signer = cls(rest_client, load_account(private_key))
        logger.info("Backend wallet initialized: %s", signer.address)
        return signer

    @property
    def address(self) -> str:
        return self._address

    async def close(self) -> None:
        await self._rest_client.close()

    async def submit(self, payload: TransactionPayload) -> TransactionReceipt:
        """Sign, submit and wait for confirmation.

        Raises:
            TransactionFailedError: If signing, submission or confirmation fails.
        """
        state = TransactionState.UNSIGNED
        txn_hash: Optional[str] = None
        bcs_payload = to_bcs_payload(payload)

        try:
            signed = await self._rest_client.create_bcs_signed_transaction(
                self._account, bcs_payload
            )
            state = TransactionState.SIGNED

            txn_hash = await self._rest_client.submit_bcs_transaction(signed)
            state = TransactionState.SUBMITTED
            logger.info("Submitted %s tx=%s", payload.function, txn_hash)

            await self._rest_client.wait_for_transaction(txn_hash)
            executed = await self._rest_client.transaction_by_hash(txn_hash)
        except (ApiError, AssertionError, httpx.HTTPError) as exc:
            logger.error(
                "Transaction %s %s -> %s tx=%s: %s",
                payload.function,
                state.value,
                TransactionState.FAILED.value,
                txn_hash,
                exc,
            )
            raise TransactionFailedError(str(exc), transaction_hash=txn_hash) from exc

        return TransactionReceipt(
            transaction_hash=txn_hash,
            state=TransactionState.CONFIRMED,
            order_id=_extract_order_id(executed),
            vm_status=executed.get("vm_status"),
        )
