from .meta import InvalidCoinTypeError, MalformedFieldError, WalletMeta, resolve_coin_type
from .models import (
    BIP44_COIN_BITCOIN,
    BIP44_COIN_BITCOIN_TESTNET,
    BIP44_COIN_SKYCOIN,
    CoinType,
    CryptoType,
    MetaKey,
    WalletType,
    default_bip44_coin,
)
from .readable import ReadableMeta, load_meta

__all__ = [
    "BIP44_COIN_BITCOIN",
    "BIP44_COIN_BITCOIN_TESTNET",
    "BIP44_COIN_SKYCOIN",
    "CoinType",
    "CryptoType",
    "InvalidCoinTypeError",
    "MalformedFieldError",
    "MetaKey",
    "ReadableMeta",
    "WalletMeta",
    "WalletType",
    "default_bip44_coin",
    "load_meta",
    "resolve_coin_type",
]
