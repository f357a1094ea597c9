from ecdsa import SigningKey, SECP256k1
from ecdsa.keys import MalformedPointError
from eth_account import Account
from eth_utils import keccak, to_checksum_address

from .config import load_keystore, normalize_hex_key
from .errors import ConfigurationError


def address_from_private_key(private_key: str) -> str:
    """Derive the EIP-55 checksummed address for a secp256k1 private key"""
    private_key_bytes = bytes.fromhex(normalize_hex_key(private_key)[2:])
    try:
        sk = SigningKey.from_string(private_key_bytes, curve=SECP256k1)
    except MalformedPointError as e:
        raise ConfigurationError(f"Invalid secp256k1 private key: {e}") from e

    # 64-byte x || y, without the 0x04 prefix
    public_key = sk.get_verifying_key().to_string()
    return to_checksum_address(keccak(public_key)[-20:])


class LocalSigner:
    """Signing identity backed by a private key held in memory"""

    def __init__(self, private_key):
        self._private_key = normalize_hex_key(private_key)
        self.address = address_from_private_key(self._private_key)

    def __repr__(self):
        return f"LocalSigner({self.address})"

    def sign_transaction(self, transaction):
        """Sign a transaction dict and return the raw signed bytes"""
        signed = Account.sign_transaction(transaction, self._private_key)
        return bytes(signed.raw_transaction)


class LocalAccountProvider:
    """Account provider reading its single credential from the config"""

    def __init__(self, config):
        self.config = config

    def list_signers(self):
        if self.config.private_key:
            return [LocalSigner(self.config.private_key)]

        if self.config.keystore_path:
            keystore = load_keystore(self.config.keystore_path)
            signer = LocalSigner(keystore["private_key"])
            recorded = keystore.get("address")
            if recorded and recorded.lower() != signer.address.lower():
                raise ConfigurationError(
                    f"Keystore address {recorded} does not match its private key ({signer.address})"
                )
            return [signer]

        return []
