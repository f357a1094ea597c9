from .errors import ConfirmationError, ReadCallError
from .network import NETWORK_ERRORS


def call_read_only(contract, name, *args):
    """Call a view function on a web3 contract, e.g. ``owner()``

    A function missing from the ABI fails the same way as a reverted call.
    """
    try:
        return contract.functions[name](*args).call()
    except (*NETWORK_ERRORS, TypeError, ValueError) as e:
        raise ReadCallError(name, e) from e


class PendingDeployment:
    """Handle for a submitted deployment transaction"""

    def __init__(self, tx_hash, abi, network, confirmation_timeout=None,
                 poll_interval=2.0, cancel=None):
        self.tx_hash = tx_hash
        self.abi = abi
        self.network = network
        self.confirmation_timeout = confirmation_timeout
        self.poll_interval = poll_interval
        self.cancel = cancel
        self.receipt = None
        self.contract = None

    def wait_for_deployment(self):
        """Block until the transaction is mined and return the deployed contract"""
        if self.contract is not None:
            return self.contract

        receipt = self.network.await_confirmation(
            self.tx_hash,
            timeout=self.confirmation_timeout,
            poll_interval=self.poll_interval,
            cancel=self.cancel,
        )

        address = receipt.get("contractAddress")
        if not address:
            raise ConfirmationError(
                f"Receipt for {self.tx_hash} has no contract address", tx_hash=self.tx_hash
            )

        self.receipt = receipt
        self.contract = self.network.contract(self.abi, address=address)
        return self.contract

    def get_address(self):
        if self.contract is None:
            raise ConfirmationError(
                f"Deployment {self.tx_hash} is not confirmed yet", tx_hash=self.tx_hash
            )
        return self.contract.address
