"""Domain constants for wallet metadata records."""

from enum import Enum
from typing import Dict, FrozenSet


class MetaKey(str, Enum):
    """Closed set of keys a wallet metadata record may hold."""

    VERSION = "version"
    FILENAME = "filename"
    LABEL = "label"
    TIMESTAMP = "tm"
    TYPE = "type"
    COIN = "coin"
    ENCRYPTED = "encrypted"
    CRYPTO_TYPE = "cryptoType"
    SEED = "seed"
    LAST_SEED = "lastSeed"  # seed for generating the next address
    SECRETS = "secrets"  # encrypted seeds and address secrets
    BIP44_COIN = "bip44Coin"
    ACCOUNTS_HASH = "accountsHash"
    SEED_PASSPHRASE = "seedPassphrase"
    XPUB = "xpub"


SENSITIVE_KEYS: FrozenSet[str] = frozenset(
    {
        MetaKey.SEED.value,
        MetaKey.LAST_SEED.value,
        MetaKey.SEED_PASSPHRASE.value,
        MetaKey.SECRETS.value,
    }
)


class CoinType(str, Enum):
    """Target chain, which decides how public keys become addresses."""

    SKYCOIN = "skycoin"
    BITCOIN = "bitcoin"


class CryptoType(str, Enum):
    """Known identifiers of the schemes that encrypt wallet secrets."""

    SHA256_XOR = "sha256-xor"
    SCRYPT_CHACHA20POLY1305 = "scrypt-chacha20poly1305"
    SCRYPT_CHACHA20POLY1305_INSECURE = "scrypt-chacha20poly1305-insecure"


class WalletType(str, Enum):
    DETERMINISTIC = "deterministic"
    COLLECTION = "collection"
    BIP44 = "bip44"
    XPUB = "xpub"


BIP44_COIN_BITCOIN = 0
BIP44_COIN_BITCOIN_TESTNET = 1
BIP44_COIN_SKYCOIN = 8000

MAX_BIP44_COIN = 2**32 - 1

_DEFAULT_BIP44_COINS: Dict[CoinType, int] = {
    CoinType.SKYCOIN: BIP44_COIN_SKYCOIN,
    CoinType.BITCOIN: BIP44_COIN_BITCOIN,
}


def default_bip44_coin(coin: CoinType) -> int:
    """Return the registered BIP-44 coin index for a coin type."""

    return _DEFAULT_BIP44_COINS[CoinType(coin)]
