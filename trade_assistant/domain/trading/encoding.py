"""
Encoding of optional (Move ``Option<T>``) entry-function arguments.

The same logical "no value" has to be written differently depending on
who serialises the payload:

    CHAIN_CLIENT  the server builds and BCS-serialises the transaction
                  itself. An option is the Move option vector: ``[]`` for
                  no value, ``[v]`` for a value.
    WALLET        the payload is handed to an external wallet, which does
                  its own serialisation. No value is plain ``None``; a
                  value is passed as itself.
"""

from enum import Enum
from typing import Any


class ArgumentEncoding(Enum):
    """Target serialiser for an entry-function payload."""

    CHAIN_CLIENT = "chain_client"
    WALLET = "wallet"


def encode_optional(value: Any, encoding: ArgumentEncoding) -> Any:
    """Encode one optional argument for the given serialiser."""
    if encoding is ArgumentEncoding.CHAIN_CLIENT:
        return [] if value is None else [value]
    return value
