"""Unit tests for the validated wallet meta load path."""

import json
import traceback
import unittest

from wallet_meta.meta import MalformedFieldError, WalletMeta
from wallet_meta.models import CoinType
from wallet_meta.readable import ReadableMeta, load_meta


class LoadMetaTests(unittest.TestCase):
    def _stored(self, **overrides: str) -> dict:
        data = {
            "version": "0.4",
            "filename": "primary.wlt",
            "label": "Primary",
            "tm": "1704067200",
            "type": "deterministic",
            "coin": "skycoin",
            "encrypted": "false",
            "cryptoType": "",
            "seed": "abandon abandon abandon",
            "lastSeed": "next-seed",
            "secrets": "",
        }
        data.update(overrides)
        return data

    def test_load_decrypted_meta(self) -> None:
        meta = load_meta(self._stored())
        self.assertIsInstance(meta, WalletMeta)
        self.assertFalse(meta.is_encrypted())
        self.assertEqual(meta.timestamp, 1704067200)
        self.assertEqual(meta.seed, "abandon abandon abandon")
        self.assertIsNone(meta.bip44_coin)
        self.assertNotIn("bip44Coin", meta.to_dict())

    def test_load_preserves_values_verbatim(self) -> None:
        stored = self._stored(encrypted="False", bip44Coin="0")
        meta = load_meta(stored)
        self.assertEqual(meta.to_dict(), stored)
        self.assertEqual(meta.bip44_coin, 0)

    def test_load_resolves_coin_alias(self) -> None:
        meta = load_meta(self._stored(coin="BTC"))
        self.assertIs(meta.coin, CoinType.BITCOIN)
        self.assertEqual(meta.find("coin"), "bitcoin")

    def test_load_encrypted_meta(self) -> None:
        stored = self._stored(
            encrypted="true",
            cryptoType="scrypt-chacha20poly1305",
            secrets="ciphertext",
            seed="",
            lastSeed="",
        )
        meta = load_meta(stored)
        self.assertTrue(meta.is_encrypted())
        self.assertEqual(meta.crypto_type, "scrypt-chacha20poly1305")

    def test_load_from_json(self) -> None:
        payload = json.dumps(self._stored(xpub="xpub-test"))
        meta = load_meta(json.loads(payload))
        self.assertEqual(meta.xpub, "xpub-test")

    def test_rejects_unknown_coin(self) -> None:
        with self.assertRaises(MalformedFieldError) as ctx:
            load_meta(self._stored(coin="eth"))
        self.assertEqual(ctx.exception.key, "coin")

    def test_rejects_malformed_flag(self) -> None:
        with self.assertRaises(MalformedFieldError) as ctx:
            load_meta(self._stored(encrypted="yes"))
        self.assertEqual(ctx.exception.key, "encrypted")

    def test_rejects_malformed_integers(self) -> None:
        with self.assertRaises(MalformedFieldError) as ctx:
            load_meta(self._stored(tm="yesterday"))
        self.assertEqual(ctx.exception.key, "tm")
        with self.assertRaises(MalformedFieldError) as ctx:
            load_meta(self._stored(bip44Coin="-1"))
        self.assertEqual(ctx.exception.key, "bip44Coin")

    def test_rejects_non_string_values(self) -> None:
        with self.assertRaises(MalformedFieldError):
            load_meta(self._stored(tm=1704067200))  # type: ignore[arg-type]

    def test_rejects_unknown_keys(self) -> None:
        with self.assertRaises(MalformedFieldError):
            load_meta(self._stored(color="blue"))

    def test_rejects_encrypted_with_plaintext_seed(self) -> None:
        stored = self._stored(encrypted="true", cryptoType="sha256-xor", secrets="blob")
        with self.assertRaises(MalformedFieldError) as ctx:
            load_meta(stored)
        self.assertEqual(ctx.exception.key, "meta")
        self.assertNotIn("abandon", str(ctx.exception))

    def test_rejection_traceback_hides_seed(self) -> None:
        stored = self._stored(seed="abandon-secret", encrypted="maybe")
        try:
            load_meta(stored)
        except MalformedFieldError as exc:
            text = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        else:
            self.fail("load_meta accepted a malformed flag")
        self.assertNotIn("abandon-secret", text)

    def test_repr_hides_sensitive_fields(self) -> None:
        stored = self._stored(seed="abandon-secret", lastSeed="last-secret", seedPassphrase="pass-secret")
        readable = ReadableMeta.model_validate(stored)
        text = repr(readable)
        for secret in ("abandon-secret", "last-secret", "pass-secret"):
            self.assertNotIn(secret, text)
        self.assertIn("Primary", text)

    def test_rejects_oversized_integers(self) -> None:
        with self.assertRaises(MalformedFieldError) as ctx:
            load_meta(self._stored(tm="9" * 5000))
        self.assertEqual(ctx.exception.key, "tm")

    def test_rejects_encrypted_without_secrets(self) -> None:
        stored = self._stored(encrypted="true", cryptoType="sha256-xor", seed="", lastSeed="")
        with self.assertRaises(MalformedFieldError):
            load_meta(stored)

    def test_rejects_decrypted_with_secrets(self) -> None:
        with self.assertRaises(MalformedFieldError):
            load_meta(self._stored(secrets="blob"))

    def test_absent_flag_with_crypto_type_rejected(self) -> None:
        stored = self._stored(cryptoType="sha256-xor")
        del stored["encrypted"]
        with self.assertRaises(MalformedFieldError):
            load_meta(stored)

    def test_from_meta_validates_in_memory_record(self) -> None:
        meta = WalletMeta()
        meta.label = "Primary"
        meta.seed = "plain"
        meta.set_encrypted("sha256-xor", "blob")
        with self.assertRaises(ValueError):
            ReadableMeta.from_meta(meta)

        meta.erase_seeds()
        readable = ReadableMeta.from_meta(meta)
        self.assertTrue(readable.is_encrypted())
        self.assertEqual(readable.to_meta(), meta)


if __name__ == "__main__":
    unittest.main()
