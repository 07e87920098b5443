"""
Async RPC Client for Solana

Provides the account-reading side of the factory client:
- Multiple endpoint fallback
- Retry logic for transport failures
- Rate limit handling
- Request timeout management
"""

from __future__ import annotations

import asyncio
import base64
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

import base58
import httpx
from solders.pubkey import Pubkey

from ..errors import RpcError, ConfigurationError
from ..config import config as global_config

logger = logging.getLogger(__name__)


@dataclass
class RpcClientConfig:
    """
    RPC client runtime configuration

    Unset values are taken from the global config (cusd_factory.config.RpcConfig).

    Usage:
        client = RpcClient(endpoint)

        config = RpcClientConfig(timeout_seconds=60, max_retries=5)
        client = RpcClient(endpoint, config=config)
    """
    timeout_seconds: float = None
    max_retries: int = None
    retry_delay_seconds: float = None
    commitment: str = None

    def __post_init__(self):
        if self.timeout_seconds is None:
            self.timeout_seconds = global_config.rpc.timeout_seconds
        if self.max_retries is None:
            self.max_retries = global_config.rpc.max_retries
        if self.retry_delay_seconds is None:
            self.retry_delay_seconds = global_config.rpc.retry_delay_seconds
        if self.commitment is None:
            self.commitment = global_config.rpc.commitment
        if self.max_retries < 1:
            raise ConfigurationError.invalid("max_retries", "must be at least 1")


class RpcClient:
    """
    Async Solana JSON-RPC client

    Implements AccountFetcher for FactoryModule.

    Usage:
        async with RpcClient("https://api.mainnet-beta.solana.com") as rpc:
            data = await rpc.fetch_account_bytes(address)

        # Multiple endpoints with fallback
        rpc = RpcClient([
            "https://primary-rpc.example.com",
            "https://backup-rpc.example.com",
        ])
    """

    def __init__(
        self,
        endpoint: Union[str, List[str], None] = None,
        config: Optional[RpcClientConfig] = None,
    ):
        """
        Initialize RPC client

        Args:
            endpoint: RPC endpoint URL or list of URLs; defaults to SOLANA_RPC_URL
            config: RPC configuration options
        """
        if endpoint is None:
            endpoint = global_config.rpc.url
        self._endpoints = [endpoint] if isinstance(endpoint, str) else list(endpoint)
        self._endpoints = [e for e in self._endpoints if e]
        if not self._endpoints:
            raise ConfigurationError.missing("SOLANA_RPC_URL")

        self._config = config or RpcClientConfig()
        self._current_endpoint_idx = 0
        self._request_id = 0
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def endpoint(self) -> str:
        """Current active endpoint"""
        return self._endpoints[self._current_endpoint_idx]

    @property
    def commitment(self) -> str:
        return self._config.commitment

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._config.timeout_seconds,
                headers={"Content-Type": "application/json"},
            )
        return self._client

    def _rotate_endpoint(self):
        if len(self._endpoints) > 1:
            self._current_endpoint_idx = (self._current_endpoint_idx + 1) % len(self._endpoints)
            logger.info(f"Rotating to RPC endpoint: {self.endpoint}")

    async def call(
        self,
        method: str,
        params: List[Any],
        timeout: Optional[float] = None,
    ) -> Any:
        """
        Make JSON-RPC call

        Transport failures are retried per endpoint, then the next endpoint
        is tried. An error object in the response is raised immediately.

        Args:
            method: RPC method name
            params: RPC parameters
            timeout: Optional timeout override

        Returns:
            RPC result

        Raises:
            RpcError: On RPC failure
        """
        client = self._get_client()
        self._request_id += 1
        body = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params,
        }
        timeout_val = timeout or self._config.timeout_seconds

        last_error: Optional[RpcError] = None
        max_retries = self._config.max_retries

        for _ in range(len(self._endpoints)):
            for attempt in range(max_retries):
                try:
                    response = await client.post(self.endpoint, json=body, timeout=timeout_val)

                    if response.status_code == 429:
                        logger.warning(f"Rate limited by {self.endpoint}")
                        last_error = RpcError.rate_limited(self.endpoint)
                    else:
                        response.raise_for_status()
                        payload = response.json()

                        if "error" in payload:
                            error = payload["error"]
                            rpc_error = RpcError(
                                f"RPC error: {error.get('message', error)}",
                                endpoint=self.endpoint,
                            )
                            rpc_error.details["rpc_error_code"] = error.get("code")
                            rpc_error.details["rpc_error_data"] = error.get("data")
                            raise rpc_error

                        return payload.get("result")

                except httpx.TimeoutException:
                    last_error = RpcError.timeout(self.endpoint, timeout_val)
                    logger.warning(f"RPC timeout (attempt {attempt + 1}/{max_retries}): {self.endpoint}")

                except httpx.HTTPStatusError as e:
                    last_error = RpcError(
                        f"HTTP error {e.response.status_code}",
                        endpoint=self.endpoint,
                        original_error=e,
                    )
                    logger.warning(f"RPC HTTP error (attempt {attempt + 1}/{max_retries}): {e}")

                except httpx.RequestError as e:
                    last_error = RpcError.connection_failed(self.endpoint, e)
                    logger.warning(f"RPC connection error (attempt {attempt + 1}/{max_retries}): {e}")

                except ValueError as e:
                    raise RpcError.invalid_response(self.endpoint, str(e))

                if attempt < max_retries - 1:
                    await asyncio.sleep(self._config.retry_delay_seconds * (attempt + 1))

            self._rotate_endpoint()

        raise last_error or RpcError("All RPC endpoints failed")

    async def get_account_info(
        self,
        address: Union[str, Pubkey],
        encoding: str = "base64",
        commitment: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Get account information

        Args:
            address: Account address
            encoding: Data encoding (base64, jsonParsed)
            commitment: Commitment level override

        Returns:
            Account info dict or None if the account does not exist
        """
        result = await self.call(
            "getAccountInfo",
            [
                str(address),
                {"encoding": encoding, "commitment": commitment or self.commitment},
            ],
        )
        if result is None:
            return None
        return result.get("value")

    async def fetch_account_bytes(self, address: Pubkey) -> Optional[bytes]:
        """Raw account data, or None when the account does not exist"""
        account = await self.get_account_info(address)
        if account is None:
            return None
        data = account.get("data")
        if not isinstance(data, list) or len(data) != 2:
            raise RpcError.invalid_response(self.endpoint, f"unexpected account data for {address}")
        encoded, encoding = data
        try:
            if encoding == "base64":
                return base64.b64decode(encoded)
            if encoding == "base58":
                return base58.b58decode(encoded)
        except ValueError as e:
            raise RpcError.invalid_response(self.endpoint, f"undecodable account data for {address}: {e}")
        raise RpcError.invalid_response(self.endpoint, f"unsupported account data encoding {encoding!r}")

    async def address_exists(self, address: Pubkey) -> bool:
        return await self.get_account_info(address) is not None

    async def close(self):
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> "RpcClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
