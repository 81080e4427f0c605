from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from rpc_contract.abi import Hasher, assemble, build_signature, encode_calldata, keccak_hex, signature_hash
from rpc_contract.catalog import CONSTRUCTOR, InterfaceCatalog, ParameterTypeList
from rpc_contract.codec import encode_params
from rpc_contract.models import LogFilter
from rpc_contract.rpc import JsonRpcClient
from rpc_contract.transaction import ContractTransaction


BlockRef = Union[str, int, None]


def _from_block(block: BlockRef) -> Union[str, int]:
    if block is None:
        return "latest"
    if isinstance(block, str) and block.isdigit():
        return int(block)
    if isinstance(block, int) and block < 0:
        raise ValueError(f"Block number must not be negative: {block}")
    return block


class Contract:
    """
    Calls and event queries against one deployed (or to be deployed) contract.

    `contract_abi` is the interface document, as JSON text or already parsed.
    The sender defaults to the node's coinbase, fetched the first time it is
    needed. `hasher` derives selectors and topics; it defaults to a local
    keccak-256 and `rpc.web3_sha3` can be passed to let the node do it.
    """

    def __init__(
        self,
        contract_abi: Union[str, List[Any], None] = None,
        *,
        contract_address: Optional[str] = None,
        rpc: Optional[JsonRpcClient] = None,
        from_address: Optional[str] = None,
        gas: Optional[int] = None,
        gas_price: Optional[int] = None,
        max_fee_per_gas: Optional[int] = None,
        max_priority_fee_per_gas: Optional[int] = None,
        hasher: Optional[Hasher] = None,
    ):
        self.catalog = InterfaceCatalog.load(contract_abi if contract_abi is not None else "[]")
        self.contract_address = contract_address
        self.rpc = rpc if rpc is not None else JsonRpcClient.from_env()
        self._from_address = from_address
        self.gas = gas
        self.gas_price = gas_price
        self.max_fee_per_gas = max_fee_per_gas
        self.max_priority_fee_per_gas = max_priority_fee_per_gas
        self.hasher: Hasher = hasher or keccak_hex

    @property
    def from_address(self) -> str:
        if self._from_address is None:
            self._from_address = self.rpc.eth_coinbase()
        return self._from_address

    @from_address.setter
    def from_address(self, value: Optional[str]) -> None:
        self._from_address = value

    def signature(self, name: str, arity: int) -> str:
        return build_signature(name, self.catalog.lookup(name, arity))

    def get_function_id(self, name: str, arity: int) -> str:
        # Full 32-byte hash; callers slice it for a selector.
        return signature_hash(self.signature(name, arity), self.hasher)

    def invoke(self, name: str, *params: Any) -> ContractTransaction:
        types = self.catalog.lookup(name, len(params))
        data = encode_calldata(build_signature(name, types), types, params, self.hasher)
        return self._prepare_transaction(data, to=self.contract_address)

    def invoke_deploy(self, bytecode: str, *params: Any) -> ContractTransaction:
        if not params and CONSTRUCTOR not in self.catalog:
            types: ParameterTypeList = ()
        else:
            types = self.catalog.lookup(CONSTRUCTOR, len(params))
        return self._prepare_transaction(assemble(bytecode, encode_params(types, params)), to=None)

    def _prepare_transaction(self, data: str, *, to: Optional[str]) -> ContractTransaction:
        return ContractTransaction(
            rpc=self.rpc,
            data=data,
            contract_address=to,
            from_address=self.from_address,
            gas=self.gas,
            gas_price=self.gas_price,
            max_fee_per_gas=self.max_fee_per_gas,
            max_priority_fee_per_gas=self.max_priority_fee_per_gas,
        )

    def build_filter(
        self,
        from_block: BlockRef,
        event: str,
        arity: int,
        *,
        address: Optional[str] = None,
    ) -> LogFilter:
        topic = self.get_function_id(event, arity)
        return LogFilter(
            address=address if address is not None else self.contract_address,
            from_block=_from_block(from_block),
            topics=[topic],
        )

    def read_event(self, from_block: BlockRef, event: str, arity: int) -> List[Dict[str, Any]]:
        log_filter = self.build_filter(from_block, event, arity)
        return self.rpc.eth_get_logs(log_filter.to_rpc())
