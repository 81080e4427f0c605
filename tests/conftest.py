from __future__ import annotations

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from rpc_contract.rpc import JsonRpcClient


class FakeNode:
    """JSON-RPC endpoint served through httpx.MockTransport; records every request."""

    def __init__(self) -> None:
        self.handlers: Dict[str, Callable[[List[Any]], Any]] = {}
        self.requests: List[Dict[str, Any]] = []

    def on(self, method: str, result: Any) -> None:
        self.handlers[method] = result if callable(result) else (lambda params, _r=result: _r)

    def params_for(self, method: str) -> List[List[Any]]:
        return [r["params"] for r in self.requests if r["method"] == method]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.requests.append(payload)
        handler = self.handlers.get(payload["method"])
        if handler is None:
            body = {"jsonrpc": "2.0", "id": payload["id"], "error": {"code": -32601, "message": "method not found"}}
        else:
            body = {"jsonrpc": "2.0", "id": payload["id"], "result": handler(payload["params"])}
        return httpx.Response(200, json=body)


@pytest.fixture
def node() -> FakeNode:
    return FakeNode()


@pytest.fixture
def rpc(node: FakeNode) -> JsonRpcClient:
    return JsonRpcClient("http://node.test", transport=httpx.MockTransport(node))
