from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from rpc_contract.config import receipt_poll_sec, receipt_timeout_sec
from rpc_contract.response import ContractResponse
from rpc_contract.rpc import JsonRpcClient, debug_event


def _int_to_hex(i: int) -> str:
    return hex(int(i))


@dataclass(frozen=True)
class ContractTransaction:
    """
    Assembled call data plus the metadata needed to send it.

    `contract_address` is None for a deployment. Gas fields are plain ints and
    are rendered as 0x quantities only when the request is built.
    """

    rpc: JsonRpcClient
    data: str
    contract_address: Optional[str] = None
    from_address: Optional[str] = None
    gas: Optional[int] = None
    gas_price: Optional[int] = None
    max_fee_per_gas: Optional[int] = None
    max_priority_fee_per_gas: Optional[int] = None

    def _base_tx(self) -> Dict[str, Any]:
        tx: Dict[str, Any] = {"data": self.data}
        if self.contract_address:
            tx["to"] = self.contract_address
        if self.from_address:
            tx["from"] = self.from_address
        if self.gas is not None:
            tx["gas"] = _int_to_hex(self.gas)
        return tx

    def call_transaction(self, block: str = "latest") -> ContractResponse:
        out = self.rpc.eth_call(self._base_tx(), block)
        return ContractResponse(out)

    def send_transaction(self) -> str:
        tx = self._base_tx()
        if self.max_fee_per_gas is not None or self.max_priority_fee_per_gas is not None:
            if self.max_fee_per_gas is not None:
                tx["maxFeePerGas"] = _int_to_hex(self.max_fee_per_gas)
            if self.max_priority_fee_per_gas is not None:
                tx["maxPriorityFeePerGas"] = _int_to_hex(self.max_priority_fee_per_gas)
        else:
            gas_price = self.gas_price if self.gas_price is not None else self.rpc.eth_gas_price()
            tx["gasPrice"] = _int_to_hex(gas_price)
        tx_hash = self.rpc.eth_send_transaction(tx)
        debug_event("send_transaction", to=tx.get("to"), sender=tx.get("from"), txHash=tx_hash)
        return tx_hash

    def wait_for_receipt(
        self,
        tx_hash: str,
        *,
        timeout_sec: Optional[float] = None,
        poll_sec: Optional[float] = None,
    ) -> Dict[str, Any]:
        timeout = receipt_timeout_sec() if timeout_sec is None else timeout_sec
        poll = receipt_poll_sec() if poll_sec is None else poll_sec
        deadline = time.time() + timeout
        while True:
            receipt = self.rpc.eth_get_transaction_receipt(tx_hash)
            if receipt is not None:
                return receipt
            if time.time() >= deadline:
                break
            time.sleep(poll)
        raise TimeoutError(f"Timed out waiting for receipt: {tx_hash}")

    def get_contract_address(
        self,
        tx_hash: str,
        *,
        timeout_sec: Optional[float] = None,
        poll_sec: Optional[float] = None,
    ) -> str:
        receipt = self.wait_for_receipt(tx_hash, timeout_sec=timeout_sec, poll_sec=poll_sec)
        address = receipt.get("contractAddress")
        if not address:
            raise RuntimeError(f"Receipt for {tx_hash} has no contractAddress")
        debug_event("contract_deployed", txHash=tx_hash, contractAddress=address)
        return address
