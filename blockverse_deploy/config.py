import json
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .errors import ConfigurationError

# ==============================================================================
# Network defaults (Core Testnet 2)
# ==============================================================================

DEFAULT_NETWORK_NAME = "Core Testnet 2"
DEFAULT_RPC_URL = "https://rpc.test2.btcs.network"
DEFAULT_CHAIN_ID = 1114
DEFAULT_CURRENCY = "CORE"

DEFAULT_ARTIFACTS_DIR = "artifacts"
DEFAULT_CONTRACT_NAME = "Project"

DEFAULT_CONFIRMATION_TIMEOUT = 600.0
DEFAULT_POLL_INTERVAL = 2.0
DEFAULT_REQUEST_TIMEOUT = 30.0


@dataclass
class DeployConfig:
    """Everything a deployment run needs to know about its environment"""

    network_name: str = DEFAULT_NETWORK_NAME
    rpc_url: str = DEFAULT_RPC_URL
    chain_id: Optional[int] = DEFAULT_CHAIN_ID
    currency_symbol: str = DEFAULT_CURRENCY

    # Credential source: a raw key wins over a keystore file
    private_key: Optional[str] = field(default=None, repr=False)
    keystore_path: Optional[str] = None

    artifacts_dir: str = DEFAULT_ARTIFACTS_DIR
    contract_name: str = DEFAULT_CONTRACT_NAME
    constructor_args: tuple = ()

    # None waits for the receipt indefinitely
    confirmation_timeout: Optional[float] = DEFAULT_CONFIRMATION_TIMEOUT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    log_file: Optional[str] = None

    def __post_init__(self):
        _parse_float("poll_interval", self.poll_interval, allow_zero=False)
        _parse_float("request_timeout", self.request_timeout, allow_zero=False)
        if self.confirmation_timeout is not None:
            _parse_float("confirmation_timeout", self.confirmation_timeout, allow_zero=False)

    @classmethod
    def from_env(cls, environ=None):
        """Build a config from DEPLOY_* environment variables"""
        env = os.environ if environ is None else environ

        timeout = _parse_timeout(env.get("DEPLOY_CONFIRMATION_TIMEOUT"))
        chain_id = env.get("DEPLOY_CHAIN_ID")

        return cls(
            network_name=env.get("DEPLOY_NETWORK_NAME", DEFAULT_NETWORK_NAME),
            rpc_url=env.get("DEPLOY_RPC_URL", DEFAULT_RPC_URL),
            chain_id=_parse_int("DEPLOY_CHAIN_ID", chain_id) if chain_id else DEFAULT_CHAIN_ID,
            currency_symbol=env.get("DEPLOY_CURRENCY", DEFAULT_CURRENCY),
            private_key=env.get("DEPLOY_PRIVATE_KEY") or None,
            keystore_path=env.get("DEPLOY_KEYSTORE") or None,
            artifacts_dir=env.get("DEPLOY_ARTIFACTS_DIR", DEFAULT_ARTIFACTS_DIR),
            contract_name=env.get("DEPLOY_CONTRACT", DEFAULT_CONTRACT_NAME),
            confirmation_timeout=timeout,
            poll_interval=_parse_float(
                "DEPLOY_POLL_INTERVAL",
                env.get("DEPLOY_POLL_INTERVAL", DEFAULT_POLL_INTERVAL),
                allow_zero=False,
            ),
            log_file=env.get("DEPLOY_LOG_FILE") or None,
        )


def _parse_int(name, value):
    try:
        return int(str(value), 0)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


def _parse_float(name, value, allow_zero=True):
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(number):
        raise ConfigurationError(f"{name} must be a finite number, got {value!r}")
    if number < 0 or (number == 0 and not allow_zero):
        qualifier = "negative" if allow_zero else "zero or negative"
        raise ConfigurationError(f"{name} must not be {qualifier}, got {value!r}")
    return number


def _parse_timeout(value):
    if value is None:
        return DEFAULT_CONFIRMATION_TIMEOUT
    if value.strip().lower() in ("", "none"):
        return None
    seconds = _parse_float("DEPLOY_CONFIRMATION_TIMEOUT", value)
    return seconds or None


# ==============================================================================
# Keystore
# ==============================================================================

def normalize_hex_key(s: str) -> str:
    s = s.strip()
    hex_part = s[2:] if s.lower().startswith("0x") else s
    if len(hex_part) != 64 or any(c not in "0123456789abcdefABCDEF" for c in hex_part):
        raise ConfigurationError("Private key must be a 32-byte hex key (64 hex chars).")
    return "0x" + hex_part.lower()


def load_keystore(path):
    """Read ``{"address": ..., "private_key": ...}`` from a JSON key file

    The legacy ``rawprivatekey(hex)`` field name is accepted as well.
    """
    keystore = Path(path)
    try:
        data = json.loads(keystore.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ConfigurationError(f"Keystore not found: {keystore}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Keystore {keystore} is not valid JSON: {e}")

    raw_key = data.get("private_key") or data.get("rawprivatekey(hex)")
    if not raw_key:
        raise ConfigurationError(f"Keystore {keystore} has no private_key field")

    return {
        "address": data.get("address"),
        "private_key": normalize_hex_key(raw_key),
    }
