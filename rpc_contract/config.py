from __future__ import annotations

import os
from pathlib import Path

from rpc_contract.env import load_env_file


DEFAULT_RPC_URL = "http://127.0.0.1:8545"


def env_file_path() -> Path:
    return Path(os.getenv("RPC_CONTRACT_ENV_FILE") or ".env")


def load_default_env() -> None:
    load_env_file(env_file_path(), override=False)


load_default_env()


def _env_number(name: str, default: float, minimum: float) -> float:
    env = os.getenv(name)
    if env is not None:
        try:
            return max(minimum, float(env))
        except ValueError:
            pass
    return default


def rpc_url() -> str:
    return os.getenv("RPC_URL") or DEFAULT_RPC_URL


def rpc_timeout_sec() -> float:
    return _env_number("RPC_TIMEOUT_SEC", 30.0, 1.0)


def receipt_timeout_sec() -> float:
    return _env_number("RECEIPT_TIMEOUT_SEC", 120.0, 0.0)


def receipt_poll_sec() -> float:
    return _env_number("RECEIPT_POLL_SEC", 1.0, 0.05)


def debug_enabled() -> bool:
    v = (os.getenv("RPC_CONTRACT_DEBUG") or "").strip().lower()
    return v in ("1", "true", "yes", "y", "on")
