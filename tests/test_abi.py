from __future__ import annotations

import pytest

from rpc_contract.abi import (
    append_prefix,
    assemble,
    build_signature,
    decode_call_result,
    derive_selector,
    encode_calldata,
    keccak_hex,
    signature_hash,
)
from rpc_contract.codec import int_word


TRANSFER_TOPIC = "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"


class TestSignature:
    """Canonical signature text."""

    def test_build_signature(self):
        assert build_signature("foo", ["uint256", "address"]) == "foo(uint256,address)"

    def test_build_signature_without_inputs(self):
        assert build_signature("totalSupply", []) == "totalSupply()"

    def test_build_signature_keeps_declared_text_and_drops_blanks(self):
        assert build_signature("f", ["uint", "", "bytes32[]"]) == "f(uint,bytes32[])"


class TestSelector:
    """Selector and event hash derivation."""

    def test_transfer_selector(self):
        assert derive_selector("transfer(address,uint256)") == "0xa9059cbb"

    def test_selector_is_deterministic(self):
        sig = "approve(address,uint256)"
        assert derive_selector(sig) == derive_selector(sig) == "0x095ea7b3"

    def test_event_hash_is_not_truncated(self):
        assert signature_hash("Transfer(address,address,uint256)") == TRANSFER_TOPIC

    def test_hasher_receives_hex_of_signature(self):
        seen = []

        def hasher(hexstr: str) -> str:
            seen.append(hexstr)
            return "0x" + "AB" * 32

        assert derive_selector("f()", hasher) == "0xabababab"
        assert seen == ["0x" + b"f()".hex()]

    def test_keccak_hex(self):
        assert keccak_hex("0x") == "0xc5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"


class TestAssemble:
    """Call data assembly."""

    def test_single_prefix(self):
        assert assemble("0xa9059cbb", "00ff") == "0xa9059cbb00ff"
        assert assemble("6080", "0x00") == "0x608000"

    def test_lower_case(self):
        assert assemble("0xABCD", "EF") == "0xabcdef"

    def test_append_prefix(self):
        assert append_prefix("abc") == "0xabc"
        assert append_prefix("0xabc") == "0xabc"

    def test_encode_calldata(self):
        addr = "0x" + "12" * 20
        data = encode_calldata("transfer(address,uint256)", ["address", "uint256"], [addr, 1000])
        assert data == "0xa9059cbb" + "0" * 24 + "12" * 20 + int_word(1000)

    def test_encode_calldata_uses_given_hasher(self):
        data = encode_calldata("f()", [], [], lambda hexstr: "0x" + "12" * 32)
        assert data == "0x12121212"


class TestDecodeCallResult:
    """Reading eth_call output."""

    def test_empty_output(self):
        assert decode_call_result("0x", ["uint256"]) == ()

    def test_decodes_words(self):
        assert decode_call_result("0x" + int_word(5) + int_word(1), ["uint256", "bool"]) == (5, True)

    @pytest.mark.parametrize("bad", [None, "", "1234", 12])
    def test_rejects_invalid_output(self, bad):
        with pytest.raises(ValueError):
            decode_call_result(bad, ["uint256"])
