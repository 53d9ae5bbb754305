"""Wallet metadata record with typed accessors and encryption transitions."""

from enum import Enum
from typing import Dict, Iterator, Mapping, Optional, Union
import logging
import re

from .models import MAX_BIP44_COIN, SENSITIVE_KEYS, CoinType, CryptoType, MetaKey

logger = logging.getLogger(__name__)

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
_INT64_DIGITS = len(str(INT64_MAX))
_UINT32_DIGITS = len(str(MAX_BIP44_COIN))

_KNOWN_KEYS = frozenset(key.value for key in MetaKey)
_TRUE_STRINGS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_STRINGS = frozenset({"0", "f", "F", "FALSE", "false", "False"})
_SIGNED_DIGITS = re.compile(r"[+-]?[0-9]+")
_DIGITS = re.compile(r"[0-9]+")
_COIN_ALIASES: Dict[str, CoinType] = {
    "sky": CoinType.SKYCOIN,
    "skycoin": CoinType.SKYCOIN,
    "btc": CoinType.BITCOIN,
    "bitcoin": CoinType.BITCOIN,
}

KeyLike = Union[MetaKey, str]


class InvalidCoinTypeError(ValueError):
    """Raised when a coin type string does not name a supported chain."""


class MalformedFieldError(ValueError):
    """Raised when a stored metadata value cannot be decoded into its type."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(f"Malformed wallet meta field {key!r}: {message}")
        self.key = key


def resolve_coin_type(value: str) -> CoinType:
    """Normalize a user supplied coin name or alias into a CoinType."""

    if not isinstance(value, str):
        raise InvalidCoinTypeError("Coin type must be a string.")
    try:
        return _COIN_ALIASES[value.lower()]
    except KeyError:
        raise InvalidCoinTypeError(f"Invalid coin type: {value!r}") from None


def parse_bool(raw: str) -> bool:
    """Decode a stored flag, accepting the spellings of Go's ParseBool."""

    if raw in _TRUE_STRINGS:
        return True
    if raw in _FALSE_STRINGS:
        return False
    raise ValueError(f"invalid boolean {raw!r}")


def format_bool(value: bool) -> str:
    """Encode a flag in its canonical stored form."""

    return "true" if value else "false"


def _significant_digits(raw: str) -> int:
    return len(raw.lstrip("+-").lstrip("0"))


def parse_int64(raw: str) -> int:
    """Decode a signed 64-bit decimal integer, rejecting anything else."""

    if not _SIGNED_DIGITS.fullmatch(raw):
        raise ValueError(f"invalid integer {raw!r}")
    if _significant_digits(raw) > _INT64_DIGITS:
        raise ValueError("integer out of int64 range")
    value = int(raw)
    if not INT64_MIN <= value <= INT64_MAX:
        raise ValueError("integer out of int64 range")
    return value


def parse_uint32(raw: str) -> int:
    """Decode an unsigned 32-bit decimal integer, rejecting anything else."""

    if not _DIGITS.fullmatch(raw):
        raise ValueError(f"invalid unsigned integer {raw!r}")
    if _significant_digits(raw) > _UINT32_DIGITS:
        raise ValueError("unsigned integer out of uint32 range")
    value = int(raw)
    if value > MAX_BIP44_COIN:
        raise ValueError("unsigned integer out of uint32 range")
    return value


def _key_name(key: KeyLike) -> str:
    if isinstance(key, MetaKey):
        return key.value
    if isinstance(key, str) and key in _KNOWN_KEYS:
        return key
    raise ValueError(f"Unknown wallet meta key: {key!r}")


def _string_value(value: object) -> str:
    if isinstance(value, Enum):
        value = value.value
    if not isinstance(value, str):
        raise TypeError("Wallet meta values must be strings.")
    return value


class WalletMeta:
    """Typed view over the string mapping that describes one wallet.

    Every value is stored as a string. Accessors decode on read and encode on
    write; cross-field consistency is maintained by the compound operations
    (``erase_seeds``, ``set_encrypted``, ``set_decrypted``, ``seal``), not by
    the individual setters. The record is not synchronized; the owning wallet
    serializes access.
    """

    def __init__(self, fields: Optional[Mapping[KeyLike, str]] = None) -> None:
        self._fields: Dict[str, str] = {}
        if fields:
            for key, value in fields.items():
                self._fields[_key_name(key)] = _string_value(value)

    def clone(self) -> "WalletMeta":
        copy = WalletMeta()
        copy._fields = dict(self._fields)
        return copy

    def find(self, key: KeyLike) -> str:
        """Return the raw stored value for a key, or an empty string."""

        return self._fields.get(_key_name(key), "")

    def to_dict(self) -> Dict[str, str]:
        return dict(self._fields)

    def erase_seeds(self) -> None:
        """Blank the plaintext seed, last seed and seed passphrase."""

        self.seed = ""
        self.last_seed = ""
        self.seed_passphrase = ""
        logger.debug("Erased plaintext seed fields")

    def set_encrypted(self, crypto_type: Union[CryptoType, str], secrets: str) -> None:
        """Record the crypto type and encrypted secrets, then raise the flag.

        Plaintext fields are left as they are; callers erase them first, or
        use ``seal`` which does both.
        """

        crypto_name = _string_value(crypto_type)
        blob = _string_value(secrets)
        self._fields[MetaKey.CRYPTO_TYPE.value] = crypto_name
        self._fields[MetaKey.SECRETS.value] = blob
        self._fields[MetaKey.ENCRYPTED.value] = format_bool(True)
        logger.debug("Wallet meta marked encrypted with %s", crypto_name)

    def set_decrypted(self) -> None:
        """Clear the flag, the secrets blob and the crypto type.

        Plaintext seeds are not restored here; the caller repopulates them
        from the decrypted secrets.
        """

        self._fields[MetaKey.ENCRYPTED.value] = format_bool(False)
        self._fields[MetaKey.SECRETS.value] = ""
        self._fields[MetaKey.CRYPTO_TYPE.value] = ""
        logger.debug("Wallet meta marked decrypted")

    def seal(self, crypto_type: Union[CryptoType, str], secrets: str) -> None:
        """Erase plaintext seeds and move to the encrypted state in one step.

        Arguments are checked before anything is erased, so a rejected call
        leaves the record untouched.
        """

        crypto_name = _string_value(crypto_type)
        blob = _string_value(secrets)
        self.erase_seeds()
        self.set_encrypted(crypto_name, blob)

    def is_encrypted(self) -> bool:
        raw = self._fields.get(MetaKey.ENCRYPTED.value)
        if raw is None:
            return False
        try:
            return parse_bool(raw)
        except ValueError as exc:
            # Only set_encrypted/set_decrypted and the validated load path write
            # this flag, so a bad value means the record was corrupted.
            logger.error("Stored encrypted flag is malformed")
            raise MalformedFieldError(MetaKey.ENCRYPTED.value, str(exc)) from exc

    @property
    def version(self) -> str:
        return self._fields.get(MetaKey.VERSION.value, "")

    @version.setter
    def version(self, value: str) -> None:
        self._fields[MetaKey.VERSION.value] = _string_value(value)

    @property
    def filename(self) -> str:
        return self._fields.get(MetaKey.FILENAME.value, "")

    @filename.setter
    def filename(self, value: str) -> None:
        self._fields[MetaKey.FILENAME.value] = _string_value(value)

    @property
    def label(self) -> str:
        return self._fields.get(MetaKey.LABEL.value, "")

    @label.setter
    def label(self, value: str) -> None:
        self._fields[MetaKey.LABEL.value] = _string_value(value)

    @property
    def timestamp(self) -> int:
        """Creation time in unix seconds.

        Lenient on purpose: an absent or unparsable value reads as 0, and an
        out of range value is clamped to the int64 bound of its sign.
        """

        raw = self._fields.get(MetaKey.TIMESTAMP.value, "")
        if not _SIGNED_DIGITS.fullmatch(raw):
            return 0
        if _significant_digits(raw) > _INT64_DIGITS:
            return INT64_MIN if raw.startswith("-") else INT64_MAX
        return max(INT64_MIN, min(INT64_MAX, int(raw)))

    @timestamp.setter
    def timestamp(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError("timestamp must be an integer.")
        if not INT64_MIN <= value <= INT64_MAX:
            raise ValueError("timestamp must fit in a signed 64-bit integer.")
        self._fields[MetaKey.TIMESTAMP.value] = str(value)

    @property
    def wallet_type(self) -> str:
        return self._fields.get(MetaKey.TYPE.value, "")

    @wallet_type.setter
    def wallet_type(self, value: str) -> None:
        self._fields[MetaKey.TYPE.value] = _string_value(value)

    @property
    def coin(self) -> Optional[CoinType]:
        """Stored coin type, or None when it was never set.

        Aliases are not resolved; values from untrusted sources go through
        ``resolve_coin_type`` before they are stored. A stored value outside
        CoinType raises MalformedFieldError; ``find(MetaKey.COIN)`` returns
        the raw string without decoding it.
        """

        raw = self._fields.get(MetaKey.COIN.value)
        if raw is None:
            return None
        try:
            return CoinType(raw)
        except ValueError as exc:
            logger.error("Stored coin type is not a known coin")
            raise MalformedFieldError(MetaKey.COIN.value, f"unknown coin type {raw!r}") from exc

    @coin.setter
    def coin(self, value: CoinType) -> None:
        self._fields[MetaKey.COIN.value] = CoinType(value).value

    @property
    def crypto_type(self) -> str:
        return self._fields.get(MetaKey.CRYPTO_TYPE.value, "")

    @property
    def secrets(self) -> str:
        return self._fields.get(MetaKey.SECRETS.value, "")

    @property
    def seed(self) -> str:
        return self._fields.get(MetaKey.SEED.value, "")

    @seed.setter
    def seed(self, value: str) -> None:
        self._fields[MetaKey.SEED.value] = _string_value(value)

    @property
    def last_seed(self) -> str:
        return self._fields.get(MetaKey.LAST_SEED.value, "")

    @last_seed.setter
    def last_seed(self, value: str) -> None:
        self._fields[MetaKey.LAST_SEED.value] = _string_value(value)

    @property
    def seed_passphrase(self) -> str:
        return self._fields.get(MetaKey.SEED_PASSPHRASE.value, "")

    @seed_passphrase.setter
    def seed_passphrase(self, value: str) -> None:
        self._fields[MetaKey.SEED_PASSPHRASE.value] = _string_value(value)

    def has_bip44_coin(self) -> bool:
        return MetaKey.BIP44_COIN.value in self._fields

    @property
    def bip44_coin(self) -> Optional[int]:
        """BIP-44 coin index, or None when the wallet has none.

        None and 0 are different answers: 0 is the bitcoin index.
        """

        raw = self._fields.get(MetaKey.BIP44_COIN.value)
        if raw is None:
            return None
        try:
            return parse_uint32(raw)
        except ValueError as exc:
            logger.error("Stored bip44 coin is malformed")
            raise MalformedFieldError(MetaKey.BIP44_COIN.value, str(exc)) from exc

    @bip44_coin.setter
    def bip44_coin(self, value: Optional[int]) -> None:
        if value is None:
            self._fields.pop(MetaKey.BIP44_COIN.value, None)
            return
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError("bip44_coin must be an integer.")
        if not 0 <= value <= MAX_BIP44_COIN:
            raise ValueError("bip44_coin must fit in an unsigned 32-bit integer.")
        self._fields[MetaKey.BIP44_COIN.value] = str(value)

    @property
    def accounts_hash(self) -> str:
        return self._fields.get(MetaKey.ACCOUNTS_HASH.value, "")

    @accounts_hash.setter
    def accounts_hash(self, value: str) -> None:
        self._fields[MetaKey.ACCOUNTS_HASH.value] = _string_value(value)

    @property
    def xpub(self) -> str:
        return self._fields.get(MetaKey.XPUB.value, "")

    @xpub.setter
    def xpub(self, value: str) -> None:
        self._fields[MetaKey.XPUB.value] = _string_value(value)

    def __contains__(self, key: object) -> bool:
        try:
            return _key_name(key) in self._fields  # type: ignore[arg-type]
        except ValueError:
            return False

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WalletMeta):
            return NotImplemented
        return self._fields == other._fields

    def __repr__(self) -> str:
        shown = {
            key: "<redacted>" if key in SENSITIVE_KEYS and value else value
            for key, value in self._fields.items()
        }
        return f"WalletMeta({shown!r})"
