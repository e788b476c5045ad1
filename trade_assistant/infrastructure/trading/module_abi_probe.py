"""
Adapter: On-chain module ABI probe.

Implements ModuleInspector. Fetches
``<fullnode>/accounts/<package>/module/<module>`` and logs what it finds
about one function. Purely diagnostic: every failure is logged and
swallowed, and the request uses its own short timeout so it never holds
up a build for more than one round trip.
"""

import logging
from typing import Optional

import httpx

from trade_assistant.domain.trading.ports import ModuleInspector

logger = logging.getLogger(__name__)


class ModuleAbiProbe(ModuleInspector):
    """Logs the declared parameters of an entry function.

    Args:
        client: Shared async HTTP client (any base URL).
        fullnode_url: Aptos fullnode REST root, e.g. ``.../v1``.
        package_address: Address the module is published under.
        api_key: Optional bearer key for the fullnode.
        origin: Optional ``Origin`` header value.
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        fullnode_url: str,
        package_address: str,
        api_key: Optional[str] = None,
        origin: Optional[str] = None,
        timeout: float = 3.0,
    ) -> None:
        self._client = client
        self._fullnode_url = fullnode_url.rstrip("/")
        self._package_address = package_address
        self._api_key = api_key
        self._origin = origin
        self._timeout = timeout

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        if self._origin:
            headers["Origin"] = self._origin
        return headers

    async def inspect_function(self, module: str, function_name: str) -> None:
        """Fetch the module ABI and log ``function_name``'s parameters."""
        url = f"{self._fullnode_url}/accounts/{self._package_address}/module/{module}"
        try:
            response = await self._client.get(
                url, headers=self._headers(), timeout=self._timeout
            )
            response.raise_for_status()
            abi = response.json().get("abi") or {}
            functions = abi.get("exposed_functions") or []
            logger.info(
                "Fetched ABI module=%s exposed_functions=%d",
                abi.get("name"),
                len(functions),
            )
            match = next(
                (fn for fn in functions if fn.get("name") == function_name), None
            )
        except (httpx.HTTPError, ValueError, AttributeError, TypeError) as exc:
            logger.warning(
                "Could not inspect ABI for %s (using hardcoded function path): %s",
                module,
                exc,
            )
            return

        if match is None:
            logger.warning("Function %s not found in module %s ABI", function_name, module)
            return
        logger.info("ABI %s::%s params=%s", module, function_name, match.get("params"))
