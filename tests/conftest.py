import json

import pytest

from dumpnef.chain.rpc import clear_cache
from tests.fixtures.scripts import GAS_TRANSFER, METHOD_SCRIPT, build_nef


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep the developer's environment out of config-dependent tests."""
    for name in ("DUMPNEF_DISABLE_COLORS", "NO_COLOR", "DUMPNEF_RPC_URL", "DUMPNEF_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _clear_rpc_cache():
    clear_cache()
    yield
    clear_cache()


@pytest.fixture()
def nef_path(tmp_path):
    """A contract.nef holding METHOD_SCRIPT and one GAS token, no side files."""
    path = tmp_path / "contract.nef"
    path.write_bytes(build_nef(METHOD_SCRIPT, (GAS_TRANSFER,)))
    return path


@pytest.fixture()
def debug_json(nef_path, tmp_path):
    """Debug info with one method over [0, 8] and a source document."""
    (tmp_path / "contract.cs").write_text("return 1;\n", encoding="utf-8")
    data = {
        "documents": ["contract.cs"],
        "document-root": str(tmp_path),
        "methods": [
            {
                "id": "Demo.Contract,Main",
                "name": "Demo.Contract,Main",
                "range": "0-8",
                "sequence-points": ["0[0]1:1-1:6"],
            }
        ],
    }
    path = tmp_path / "contract.debug.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path
