import io
import json
from unittest.mock import MagicMock

import pytest
from eth_abi import encode
from eth_utils import function_signature_to_4byte_selector
from web3 import Web3
from web3.providers import BaseProvider

from blockverse_deploy.config import DeployConfig
from blockverse_deploy.console import ConsoleLog
from blockverse_deploy.network import Web3Network

# Well-known throwaway key from the eth-account documentation
TEST_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
TEST_ADDRESS = "0x2c7536E3605D9C16a7a3D7b1898e529396a65c23"

CONTRACT_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
TX_HASH = "0x" + "ab" * 32
ONE_ETHER = 10 ** 18
CHAIN_ID = 1114

PROJECT_ABI = [
    {"inputs": [], "stateMutability": "nonpayable", "type": "constructor"},
    {
        "inputs": [],
        "name": "owner",
        "outputs": [{"internalType": "address", "name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "memberCount",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "proposalCount",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"internalType": "string", "name": "name", "type": "string"}],
        "name": "joinDAO",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]

PROJECT_BYTECODE = "0x6080604052348015600f57600080fd5b50"


def selector_of(name):
    return "0x" + function_signature_to_4byte_selector(f"{name}()").hex()


def receipt(status=1, contract_address=CONTRACT_ADDRESS, block_number=16):
    return {
        "transactionHash": TX_HASH,
        "blockNumber": hex(block_number),
        "status": hex(status),
        "gasUsed": hex(100_000),
        "contractAddress": contract_address.lower() if contract_address else None,
    }


class NodeError:
    """JSON-RPC error object the fake node answers with"""

    def __init__(self, message, code=-32000):
        self.message = message
        self.code = code


class FakeNode(BaseProvider):
    """In-memory JSON-RPC node serving a web3 connection"""

    def __init__(self, balance=ONE_ETHER, receipts=None, call_results=None,
                 errors=None, call_errors=None):
        super().__init__()
        self.balance = balance
        # Each entry answers one receipt poll; the last one repeats
        self.receipts = list(receipts) if receipts is not None else [receipt()]
        self.call_results = call_results if call_results is not None else {
            selector_of("owner"): encode(["address"], [TEST_ADDRESS]),
            selector_of("memberCount"): encode(["uint256"], [1]),
            selector_of("proposalCount"): encode(["uint256"], [0]),
        }
        self.errors = errors or {}
        self.call_errors = call_errors or {}
        self.methods = []
        self.sent = []
        self.receipt_requests = 0
        self.calls = []

    def make_request(self, method, params):
        self.methods.append(method)
        if method in self.errors:
            return self._error(self.errors[method])

        handler = getattr(self, "_" + method, None)
        if handler is None:
            return self._error(NodeError(f"method {method} not supported", code=-32601))

        result = handler(*params)
        if isinstance(result, NodeError):
            return self._error(result)
        return {"jsonrpc": "2.0", "id": 1, "result": result}

    @staticmethod
    def _error(error):
        return {"jsonrpc": "2.0", "id": 1, "error": {"code": error.code, "message": error.message}}

    def _eth_chainId(self):
        return hex(CHAIN_ID)

    def _eth_getBalance(self, address, block):
        return hex(self.balance)

    def _eth_getTransactionCount(self, address, block):
        return "0x0"

    def _eth_gasPrice(self):
        return hex(10 ** 9)

    def _eth_estimateGas(self, transaction, *block):
        return hex(100_000)

    def _eth_sendRawTransaction(self, raw_transaction):
        self.sent.append(raw_transaction)
        return TX_HASH

    def _eth_getTransactionReceipt(self, tx_hash):
        self.receipt_requests += 1
        if len(self.receipts) > 1:
            return self.receipts.pop(0)
        return self.receipts[0]

    def _eth_call(self, transaction, *block):
        selector = (transaction.get("data") or transaction.get("input"))[:10]
        self.calls.append(selector)
        if selector in self.call_errors:
            return self.call_errors[selector]
        if selector not in self.call_results:
            return NodeError("execution reverted", code=3)
        return "0x" + self.call_results[selector].hex()


def make_network(node, log, chain_id=CHAIN_ID):
    return Web3Network(Web3(node), log, chain_id=chain_id, session=MagicMock())


@pytest.fixture
def streams():
    return io.StringIO(), io.StringIO()


@pytest.fixture
def log(streams):
    out, err = streams
    return ConsoleLog(out=out, err=err)


def write_artifact(root, name, abi, bytecode):
    source_dir = root / "contracts" / f"{name}.sol"
    source_dir.mkdir(parents=True, exist_ok=True)
    artifact = {
        "_format": "hh-sol-artifact-1",
        "contractName": name,
        "sourceName": f"contracts/{name}.sol",
        "abi": abi,
        "bytecode": bytecode,
        "deployedBytecode": "0x",
    }
    (source_dir / f"{name}.json").write_text(json.dumps(artifact), encoding="utf-8")
    (source_dir / f"{name}.dbg.json").write_text(json.dumps({"buildInfo": "x"}), encoding="utf-8")
    return source_dir / f"{name}.json"


@pytest.fixture
def artifacts_dir(tmp_path):
    root = tmp_path / "artifacts"
    write_artifact(root, "Project", PROJECT_ABI, PROJECT_BYTECODE)
    return root


@pytest.fixture
def config(artifacts_dir):
    return DeployConfig(
        private_key=TEST_PRIVATE_KEY,
        artifacts_dir=str(artifacts_dir),
        confirmation_timeout=None,
        poll_interval=0.001,
    )
