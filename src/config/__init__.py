# config/__init__.py
from __future__ import annotations

from typing import Optional

from config.chains import default_chain_registry
from config.settings import AuthoritySettings, load_json
from core.registry import ChainRegistry, StaticChainRegistry
from engine.authorizer import AuthorizationService
from helper.crypto import KeystoreSigner
from rpc.base import ChainClientFactory
from rpc.web3_client import Web3ChainClient


# ---------------------------------------------------------------------
# 1) Chain registry
# ---------------------------------------------------------------------

def make_chain_registry(settings: AuthoritySettings) -> ChainRegistry:
    """
    Build the registry once at start-up.

      - With CHAINS_FILE set, the JSON file is the whole registry.
      - Otherwise the built-in deployment tables are used.
    """
    if settings.chains_file is not None:
        return StaticChainRegistry.from_mapping(load_json(settings.chains_file))
    return default_chain_registry()


# ---------------------------------------------------------------------
# 2) Authority signer
# ---------------------------------------------------------------------

def make_signer(settings: AuthoritySettings) -> KeystoreSigner:
    """
    Load the encrypted keystore. The key itself is only decrypted while
    signing; a missing password surfaces as SigningError at that point.
    """
    return KeystoreSigner(load_json(settings.keystore_path), settings.password)


# ---------------------------------------------------------------------
# 3) Service
# ---------------------------------------------------------------------

def make_authorization_service(
    settings: AuthoritySettings,
    *,
    client_factory: Optional[ChainClientFactory] = None,
) -> AuthorizationService:
    return AuthorizationService(
        registry=make_chain_registry(settings),
        signer=make_signer(settings),
        client_factory=client_factory or Web3ChainClient,
    )
