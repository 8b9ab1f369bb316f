# src/config/chains.py
from __future__ import annotations

from typing import Dict

from core.registry import StaticChainRegistry


# Blocks required on top of the deposit block, per source chain.
BLOCK_CONFIRMATIONS: Dict[int, int] = {
    97: 1,       # BSC test net
    56: 15,      # BSC main net
    1: 4,        # ETH main net
    5: 1,        # Goerli test net
    42: 1,       # ETH Kovan test net
    256: 3,      # HECO test net
    10000: 2,    # SmartBCH main net
    568: 1,      # DOGE test net
    2000: 3,     # DOGE chain main net
    84531: 1,    # Base Goerli test net
    8453: 1,     # Base main net
}

BRIDGE_CONTRACTS: Dict[int, str] = {
    1: "0xC30B6B57BEC9020a95e0a6CF275b43CC00C9d3f0",
    5: "0x2f30cf73b5e4E4f79f6aEE1A5871f5E29c1caE98",
    97: "0xfa581215b134E5623830E44cE1E37Fb9830dD412",
    56: "0xC9AA9aa98563c2f1AA66804E1EFa0f07A807321C",
    256: "0xCee23c02B819e4B9b6E34753e3c0C7f21c4bC398",
    10000: "0x1336001CBdb94C5cf95ee93F2dC3CA99Db382Ff4",
    568: "0x290B5c5587B78C9bf3d9e5D7f1703749037CbE22",
    2000: "0x403bc08DdE4272b91D31155E6905575dd3c1f283",
}

BRIDGE_NFT_CONTRACTS: Dict[int, str] = {
    5: "0x4b5981260f634F010210267966b2D992ea6271C7",
    10000: "0x746B3078284e33Be5eBDb6f3Ac068FC2fAb91c00",
    84531: "0x746B3078284e33Be5eBDb6f3Ac068FC2fAb91c00",
    8453: "0xC30B6B57BEC9020a95e0a6CF275b43CC00C9d3f0",
}

PROVIDERS: Dict[int, str] = {
    97: "https://bsctestapi.terminet.io/rpc",
    56: "https://bsc-dataseed1.ninicoin.io",
    42: "https://kovan.infura.io/v3/9aa3d95b3bc440fa88ea12eaa4456161",
    1: "https://rpc.ankr.com/eth",
    5: "https://goerli.infura.io/v3/680f44b87fb44b4d93ae840a276a4d23",
    256: "https://http-testnet.hecochain.com",
    10000: "https://rpc.smartbch.org",
    568: "https://rpc-testnet.dogechain.dog",
    2000: "https://rpc.dogechain.dog",
    84531: "https://goerli.base.org",
    8453: "https://mainnet.base.org",
}


def default_chain_registry() -> StaticChainRegistry:
    """Registry of the chains the bridge is deployed on."""
    return StaticChainRegistry.from_tables(
        providers=PROVIDERS,
        confirmations=BLOCK_CONFIRMATIONS,
        bridges=BRIDGE_CONTRACTS,
        nft_bridges=BRIDGE_NFT_CONTRACTS,
    )
