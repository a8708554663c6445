import base64

import pytest
import responses

from dumpnef.chain.rpc import RPCError
from dumpnef.loader import (
    InputNotFound,
    contract_from_state,
    decode_inline_script,
    load_contract,
)
from dumpnef.nef import NefFormatError
from tests.fixtures.scripts import GAS_TRANSFER, METHOD_SCRIPT, PUSH_HI

RPC_URL = "http://localhost:10332"


def _state(script: bytes = PUSH_HI) -> dict:
    return {
        "id": 5,
        "nef": {
            "magic": 860243278,
            "script": base64.b64encode(script).decode(),
            "tokens": [
                {
                    "hash": "0xd2a4cff31913016155e38e474a2c06d08be276cf",
                    "method": "transfer",
                    "paramcount": 4,
                    "hasreturnvalue": True,
                    "callflags": "All",
                }
            ],
        },
        "manifest": {"abi": {"methods": [{"name": "main", "offset": 0}]}},
    }


def test_decode_hex():
    assert decode_inline_script("0x0c02686940") == PUSH_HI
    assert decode_inline_script("0c026869400") is None  # odd length


def test_decode_base64():
    assert decode_inline_script("DAJoaUA=") == PUSH_HI


def test_base64_tried_before_hex():
    # "4040" is valid in both encodings; Base64 wins unless 0x-prefixed
    assert decode_inline_script("4040") == base64.b64decode("4040")
    assert decode_inline_script("0x4040") == b"\x40\x40"


def test_decode_garbage():
    assert decode_inline_script("not a script!") is None


def test_load_nef_file(nef_path):
    contract = load_contract(str(nef_path))
    assert contract.script == METHOD_SCRIPT
    assert contract.tokens == (GAS_TRANSFER,)
    assert contract.path == nef_path


def test_load_corrupt_nef_file(tmp_path):
    path = tmp_path / "broken.nef"
    path.write_bytes(b"\x00" * 10)
    with pytest.raises(NefFormatError):
        load_contract(str(path))


def test_load_inline_script():
    contract = load_contract("0x0c02686940")
    assert contract.script == PUSH_HI
    assert contract.tokens == ()
    assert contract.path is None


def test_load_long_inline_script():
    # Longer than the file name limit, so the path check must not raise
    script = "21" * 300 + "40"
    contract = load_contract(script)
    assert contract.script == bytes.fromhex(script)
    assert contract.path is None


def test_missing_input():
    with pytest.raises(InputNotFound, match="Base64 or Hex"):
        load_contract("/no/such/file.nef")


def test_contract_from_state():
    contract = contract_from_state(_state())
    assert contract.script == PUSH_HI
    assert contract.tokens == (GAS_TRANSFER,)
    assert contract.method_names == {0: "main"}


def test_contract_from_malformed_state():
    state = _state()
    del state["nef"]["script"]
    with pytest.raises(RPCError, match="Malformed"):
        contract_from_state(state)


@responses.activate
def test_load_contract_over_rpc():
    responses.post(RPC_URL, json={"jsonrpc": "2.0", "id": 1, "result": _state()})
    contract = load_contract("0xd2a4cff31913016155e38e474a2c06d08be276cf", RPC_URL)
    assert contract.script == PUSH_HI
    assert contract.path is None
