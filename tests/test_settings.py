import json
from pathlib import Path

import pytest

from authority_runner import main, parse_args
from config import make_authorization_service, make_chain_registry
from config.settings import AuthoritySettings
from core.enums import AssetKind
from engine.authorizer import AuthorizationSuccess

from conftest import BRIDGE_5, BRIDGE_56, PASSWORD, RPC_5, RPC_56, TX_ID, fungible_log, make_receipt


def test_from_env_reads_variables(tmp_path):
    settings = AuthoritySettings.from_env({
        "PW": "secret",
        "KEYSTORE_PATH": str(tmp_path / "key.json"),
        "LOG_LEVEL": "debug",
    })

    assert settings.password.get_secret_value() == "secret"
    assert settings.keystore_path == tmp_path / "key.json"
    assert settings.chains_file is None
    assert settings.log_level == "DEBUG"
    assert "secret" not in repr(settings)


def test_from_env_defaults():
    settings = AuthoritySettings.from_env({})

    assert settings.password is None
    assert settings.keystore_path == Path(".keystore.json")
    assert settings.log_level == "INFO"


def test_from_env_loads_dotenv_file(tmp_path, monkeypatch):
    # recorded first so that values loaded from the file are undone afterwards
    for name in ("PW", "CHAINS_FILE"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    dotenv = tmp_path / ".env"
    dotenv.write_text("PW=from-dotenv\nCHAINS_FILE=chains.json\n")

    settings = AuthoritySettings.from_env(dotenv_path=dotenv)

    assert settings.password.get_secret_value() == "from-dotenv"
    assert settings.chains_file == Path("chains.json")


@pytest.fixture
def chains_file(tmp_path):
    path = tmp_path / "chains.json"
    path.write_text(json.dumps({
        "5": {"rpc_endpoint": RPC_5, "confirmation_depth": 1, "bridge_contract": BRIDGE_5},
        "56": {"rpc_endpoint": RPC_56, "confirmation_depth": 15, "bridge_contract": BRIDGE_56},
    }))
    return path


@pytest.fixture
def keystore_file(tmp_path, keystore):
    path = tmp_path / "keystore.json"
    path.write_text(json.dumps(keystore))
    return path


def test_chains_file_replaces_default_tables(chains_file):
    registry = make_chain_registry(AuthoritySettings(chains_file=chains_file))

    assert registry.chain_ids() == [5, 56]
    assert registry.bridge_for(56, AssetKind.FUNGIBLE) == BRIDGE_56


@pytest.mark.asyncio
async def test_service_built_from_settings(chains_file, keystore_file, chains, client_factory):
    chains[RPC_5].add_receipt(make_receipt([fungible_log()]))
    settings = AuthoritySettings(
        password=PASSWORD, keystore_path=keystore_file, chains_file=chains_file
    )

    service = make_authorization_service(settings, client_factory=client_factory)
    result = await service.authorize(TX_ID, 5)

    assert isinstance(result, AuthorizationSuccess)
    assert result.bridge == BRIDGE_56


def test_parse_args():
    args = parse_args([TX_ID, "5", "--nft"])

    assert args.tx_id == TX_ID
    assert args.from_chain_id == 5
    assert args.nft is True
    assert parse_args([TX_ID, "56"]).nft is False


def test_main_reports_missing_keystore(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("KEYSTORE_PATH", str(tmp_path / "missing.json"))

    assert main([TX_ID, "5"]) == 2
    assert "Configuration error" in capsys.readouterr().err
