"""
Declared signatures of the exchange entry functions this service calls.

The signer parameter is supplied by whoever signs and is not listed.
Argument count and order must match the on-chain declaration exactly.
"""

from dataclasses import dataclass

DEX_ACCOUNTS_MODULE = "dex_accounts"


@dataclass(frozen=True)
class EntryFunction:
    """An on-chain entry function and its declared parameter types."""

    module: str
    name: str
    parameter_types: tuple[str, ...]

    def function_id(self, package_address: str) -> str:
        """Return ``<package>::<module>::<name>``."""
        return f"{package_address}::{self.module}::{self.name}"

    @property
    def arity(self) -> int:
        return len(self.parameter_types)

    def is_optional(self, index: int) -> bool:
        """Whether the parameter at ``index`` is an ``Option<T>``."""
        return self.parameter_types[index].startswith("0x1::option::Option<")


PLACE_ORDER_TO_SUBACCOUNT = EntryFunction(
    module=DEX_ACCOUNTS_MODULE,
    name="place_order_to_subaccount",
    parameter_types=(
        "address",  # subaccount
        "address",  # market object
        "u64",  # price
        "u64",  # size
        "bool",  # is_buy
        "u8",  # time_in_force
        "bool",  # is_reduce_only
        "0x1::option::Option<0x1::string::String>",  # client_order_id
        "0x1::option::Option<u64>",  # stop_price
        "0x1::option::Option<u64>",  # tp_trigger_price
        "0x1::option::Option<u64>",  # tp_limit_price
        "0x1::option::Option<u64>",  # sl_trigger_price
        "0x1::option::Option<u64>",  # sl_limit_price
        "0x1::option::Option<address>",  # builder_addr
        "0x1::option::Option<u64>",  # builder_fee
    ),
)

DELEGATE_TRADING_TO_FOR_SUBACCOUNT = EntryFunction(
    module=DEX_ACCOUNTS_MODULE,
    name="delegate_trading_to_for_subaccount",
    parameter_types=(
        "address",  # subaccount
        "address",  # account_to_delegate_to
        "0x1::option::Option<u64>",  # expiration_timestamp_secs
    ),
)

ENTRY_FUNCTIONS = {
    f.name: f for f in (PLACE_ORDER_TO_SUBACCOUNT, DELEGATE_TRADING_TO_FOR_SUBACCOUNT)
}
