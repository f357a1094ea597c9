import time

import requests
from web3 import HTTPProvider, Web3
from web3.exceptions import TransactionNotFound, Web3Exception

from .errors import ConfirmationError, ConfirmationTimeout, RPCError

# Failures a node round trip can raise through web3
NETWORK_ERRORS = (Web3Exception, requests.RequestException)


class Web3Network:
    """Network provider backed by a web3.py connection to a single node"""

    def __init__(self, w3, log, chain_id=None, session=None):
        self.w3 = w3
        self.log = log
        self.session = session
        self._chain_id = chain_id

    @classmethod
    def from_config(cls, config, log):
        session = requests.Session()
        provider = HTTPProvider(
            config.rpc_url,
            request_kwargs={"timeout": config.request_timeout},
            session=session,
        )
        return cls(Web3(provider), log, chain_id=config.chain_id, session=session)

    def close(self):
        if self.session is not None:
            self.session.close()

    def _rpc(self, description, fn, *args):
        try:
            return fn(*args)
        except NETWORK_ERRORS as e:
            raise RPCError(f"{description} failed: {e}") from e

    @property
    def chain_id(self):
        if self._chain_id is None:
            self._chain_id = self._rpc("eth_chainId", lambda: self.w3.eth.chain_id)
        return self._chain_id

    def get_balance(self, address):
        return self._rpc("eth_getBalance", self.w3.eth.get_balance, address)

    def get_transaction_count(self, address):
        return self._rpc("eth_getTransactionCount", self.w3.eth.get_transaction_count, address, "pending")

    def gas_price(self):
        return self._rpc("eth_gasPrice", lambda: self.w3.eth.gas_price)

    def send_raw_transaction(self, raw_transaction):
        tx_hash = self._rpc("eth_sendRawTransaction", self.w3.eth.send_raw_transaction, raw_transaction)
        return Web3.to_hex(tx_hash)

    def contract(self, abi, bytecode=None, address=None):
        if address is not None:
            return self.w3.eth.contract(address=address, abi=abi)
        return self.w3.eth.contract(abi=abi, bytecode=bytecode)

    def await_confirmation(self, tx_hash, timeout=None, poll_interval=2.0, cancel=None):
        """
        Wait for the transaction receipt

        ``timeout`` of None waits indefinitely. ``cancel`` is an optional
        ``threading.Event``; setting it stops the wait, it does not
        withdraw the transaction.
        """
        if timeout:
            self.log.step(f"Waiting for confirmation (timeout: {timeout:g}s)...")
        else:
            self.log.step("Waiting for confirmation...")

        start_time = time.monotonic()

        while True:
            if cancel is not None and cancel.is_set():
                raise ConfirmationError(f"Stopped waiting for {tx_hash}: cancelled", tx_hash=tx_hash)

            receipt = None
            try:
                receipt = self.w3.eth.get_transaction_receipt(tx_hash)
            except TransactionNotFound:
                pass
            except NETWORK_ERRORS as e:
                self.log.warning(f"Error checking status: {e}")

            if receipt is not None:
                if receipt.get("status") == 0:
                    raise ConfirmationError(
                        f"Transaction {tx_hash} reverted in block {receipt['blockNumber']}",
                        tx_hash=tx_hash,
                    )
                self.log.ok(f"Transaction confirmed in block {receipt['blockNumber']}")
                return receipt

            if timeout and time.monotonic() - start_time >= timeout:
                raise ConfirmationTimeout(
                    f"Transaction {tx_hash} not confirmed after {timeout:g}s", tx_hash=tx_hash
                )

            if cancel is not None:
                cancel.wait(poll_interval)
            else:
                time.sleep(poll_interval)
