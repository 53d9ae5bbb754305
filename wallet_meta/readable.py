"""Validated load path for wallet metadata read from storage."""

from typing import Any, Dict, Mapping, Optional
import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .meta import (
    MalformedFieldError,
    WalletMeta,
    parse_bool,
    parse_int64,
    parse_uint32,
    resolve_coin_type,
)

logger = logging.getLogger(__name__)


class ReadableMeta(BaseModel):
    """Persisted form of a wallet metadata record.

    Values are kept as stored except ``coin``, which is normalized through
    ``resolve_coin_type`` so aliases such as ``"BTC"`` load as ``"bitcoin"``.
    """

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True, hide_input_in_errors=True)

    version: Optional[str] = None
    filename: Optional[str] = None
    label: Optional[str] = None
    timestamp: Optional[str] = Field(default=None, alias="tm")
    wallet_type: Optional[str] = Field(default=None, alias="type")
    coin: Optional[str] = None
    encrypted: Optional[str] = None
    crypto_type: Optional[str] = Field(default=None, alias="cryptoType")
    seed: Optional[str] = Field(default=None, repr=False)
    last_seed: Optional[str] = Field(default=None, alias="lastSeed", repr=False)
    secrets: Optional[str] = Field(default=None, repr=False)
    bip44_coin: Optional[str] = Field(default=None, alias="bip44Coin")
    accounts_hash: Optional[str] = Field(default=None, alias="accountsHash")
    seed_passphrase: Optional[str] = Field(default=None, alias="seedPassphrase", repr=False)
    xpub: Optional[str] = None

    @field_validator("timestamp")
    @classmethod
    def _check_timestamp(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            parse_int64(value)
        return value

    @field_validator("encrypted")
    @classmethod
    def _check_encrypted(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            parse_bool(value)
        return value

    @field_validator("bip44_coin")
    @classmethod
    def _check_bip44_coin(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            parse_uint32(value)
        return value

    @field_validator("coin")
    @classmethod
    def _resolve_coin(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return resolve_coin_type(value).value

    @model_validator(mode="after")
    def _check_encryption_state(self) -> "ReadableMeta":
        if self.is_encrypted():
            if not self.crypto_type:
                raise ValueError("Encrypted wallet meta requires cryptoType.")
            if not self.secrets:
                raise ValueError("Encrypted wallet meta requires secrets.")
            plaintext = {
                "seed": self.seed,
                "lastSeed": self.last_seed,
                "seedPassphrase": self.seed_passphrase,
            }
            for key, value in plaintext.items():
                if value:
                    raise ValueError(f"Encrypted wallet meta must not hold plaintext {key}.")
        else:
            if self.crypto_type:
                raise ValueError("Decrypted wallet meta must not carry cryptoType.")
            if self.secrets:
                raise ValueError("Decrypted wallet meta must not carry secrets.")
        return self

    def is_encrypted(self) -> bool:
        return self.encrypted is not None and parse_bool(self.encrypted)

    def to_dict(self) -> Dict[str, str]:
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_meta(self) -> WalletMeta:
        return WalletMeta(self.to_dict())

    @staticmethod
    def from_meta(meta: WalletMeta) -> "ReadableMeta":
        return ReadableMeta.model_validate(meta.to_dict())


def load_meta(data: Mapping[str, Any]) -> WalletMeta:
    """Validate a stored metadata mapping and build a record from it.

    Raises MalformedFieldError naming the first offending key; invariant
    violations spanning several keys are reported under ``"meta"``.
    """

    try:
        readable = ReadableMeta.model_validate(dict(data))
    except ValidationError as exc:
        first = exc.errors()[0]
        key = ".".join(str(part) for part in first["loc"]) or "meta"
        logger.warning("Rejected stored wallet meta at %s", key)
        raise MalformedFieldError(key, first["msg"]) from None
    return readable.to_meta()
