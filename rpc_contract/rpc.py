from __future__ import annotations

import itertools
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from rpc_contract.config import debug_enabled, rpc_timeout_sec, rpc_url


_id_counter = itertools.count(1)


class JsonRpcError(RuntimeError):
    def __init__(self, message: str, *, data: Any = None):
        super().__init__(message)
        self.data = data


def debug_event(msg: str, **fields: Any) -> None:
    if debug_enabled():
        print(json.dumps({"ts": datetime.now(timezone.utc).isoformat(), "msg": msg, **fields}, default=str))


@dataclass(frozen=True)
class JsonRpcClient:
    url: str
    timeout_sec: float = 30.0
    transport: Optional[httpx.BaseTransport] = None

    @classmethod
    def from_env(cls) -> "JsonRpcClient":
        return cls(rpc_url(), timeout_sec=rpc_timeout_sec())

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout_sec, transport=self.transport)

    def call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": next(_id_counter),
            "method": method,
            "params": params or [],
        }
        debug_event("rpc_request", method=method, id=payload["id"])
        with self._client() as client:
            resp = client.post(self.url, json=payload)
            resp.raise_for_status()
            data = resp.json()
        if "error" in data and data["error"] is not None:
            err = data["error"]
            raise JsonRpcError(f"RPC error calling {method}: {err}", data=err)
        return data.get("result")

    # --- Convenience wrappers
    def eth_chain_id(self) -> int:
        return int(self.call("eth_chainId"), 16)

    def eth_block_number(self) -> int:
        return int(self.call("eth_blockNumber"), 16)

    def eth_coinbase(self) -> str:
        return self.call("eth_coinbase")

    def eth_gas_price(self) -> int:
        return int(self.call("eth_gasPrice"), 16)

    def eth_call(self, tx: Dict[str, Any], block: str = "latest") -> str:
        return self.call("eth_call", [tx, block])

    def eth_send_transaction(self, tx: Dict[str, Any]) -> str:
        return self.call("eth_sendTransaction", [tx])

    def eth_get_transaction_receipt(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        return self.call("eth_getTransactionReceipt", [tx_hash])

    def eth_get_logs(self, log_filter: Dict[str, Any]) -> List[Dict[str, Any]]:
        return self.call("eth_getLogs", [log_filter]) or []

    def web3_sha3(self, hexstr: str) -> str:
        return self.call("web3_sha3", [hexstr])
