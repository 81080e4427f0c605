from __future__ import annotations

import os

from rpc_contract import config
from rpc_contract.env import load_env_file


class TestConfig:
    """Environment getters and their defaults."""

    def test_defaults(self, monkeypatch):
        for name in ("RPC_URL", "RPC_TIMEOUT_SEC", "RECEIPT_TIMEOUT_SEC", "RECEIPT_POLL_SEC", "RPC_CONTRACT_DEBUG"):
            monkeypatch.delenv(name, raising=False)
        assert config.rpc_url() == config.DEFAULT_RPC_URL
        assert config.rpc_timeout_sec() == 30.0
        assert config.receipt_timeout_sec() == 120.0
        assert config.receipt_poll_sec() == 1.0
        assert config.debug_enabled() is False

    def test_malformed_number_falls_back(self, monkeypatch):
        monkeypatch.setenv("RPC_TIMEOUT_SEC", "soon")
        assert config.rpc_timeout_sec() == 30.0

    def test_numbers_are_clamped(self, monkeypatch):
        monkeypatch.setenv("RECEIPT_POLL_SEC", "0")
        assert config.receipt_poll_sec() == 0.05

    def test_debug_flag(self, monkeypatch):
        monkeypatch.setenv("RPC_CONTRACT_DEBUG", "Yes")
        assert config.debug_enabled() is True


class TestLoadEnvFile:
    """Dotenv parsing."""

    def test_parses_lines(self, tmp_path, monkeypatch):
        for name in ("RC_A", "RC_B", "RC_C"):
            monkeypatch.delenv(name, raising=False)
        path = tmp_path / ".env"
        path.write_text("# comment\n\nRC_A=1\nexport RC_B = 'two words'\nnot a pair\nRC_C=\"x=y\"\n", encoding="utf-8")
        assert load_env_file(path) == 3
        assert os.environ["RC_A"] == "1"
        assert os.environ["RC_B"] == "two words"
        assert os.environ["RC_C"] == "x=y"

    def test_does_not_override_by_default(self, tmp_path, monkeypatch):
        monkeypatch.setenv("RC_A", "keep")
        path = tmp_path / ".env"
        path.write_text("RC_A=new\n", encoding="utf-8")
        load_env_file(path)
        assert os.environ["RC_A"] == "keep"
        load_env_file(path, override=True)
        assert os.environ["RC_A"] == "new"

    def test_missing_file(self, tmp_path):
        assert load_env_file(tmp_path / "absent.env") == 0
