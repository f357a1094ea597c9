"""
Hardhat artifact lookup and contract factories

Artifacts are the JSON files Hardhat writes under
``artifacts/contracts/<Source>.sol/<Name>.json``; each carries the
contract ``abi`` and creation ``bytecode``. Debug companions
(``<Name>.dbg.json``) are ignored.
"""

import json
from pathlib import Path

from .contract import PendingDeployment
from .errors import ArtifactNotFound, RPCError, SubmissionError
from .network import NETWORK_ERRORS


class ContractArtifact:
    """Compiled contract: name, ABI and creation bytecode"""

    def __init__(self, name, abi, bytecode, path=None):
        self.name = name
        self.abi = abi
        self.bytecode = bytecode
        self.path = path


class ArtifactRegistry:
    """Resolves contract names to artifacts under a Hardhat artifacts directory"""

    def __init__(self, artifacts_dir, network, confirmation_timeout=None,
                 poll_interval=2.0, cancel=None):
        self.artifacts_dir = Path(artifacts_dir)
        self.network = network
        self.confirmation_timeout = confirmation_timeout
        self.poll_interval = poll_interval
        self.cancel = cancel

    def find_artifact_path(self, name):
        if not self.artifacts_dir.is_dir():
            raise ArtifactNotFound(name, f"artifacts directory {self.artifacts_dir} does not exist")

        candidates = sorted(
            path for path in self.artifacts_dir.rglob(f"{name}.json")
            if not path.name.endswith(".dbg.json")
        )
        if not candidates:
            raise ArtifactNotFound(name, f"no {name}.json under {self.artifacts_dir}")
        if len(candidates) > 1:
            paths = ", ".join(str(p) for p in candidates)
            raise ArtifactNotFound(name, f"ambiguous name, found {paths}")
        return candidates[0]

    def load_artifact(self, name):
        path = self.find_artifact_path(name)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ArtifactNotFound(name, f"cannot read {path}: {e}") from e

        abi = data.get("abi")
        bytecode = data.get("bytecode") or ""
        if isinstance(bytecode, dict):
            # solc standard-json layout
            bytecode = bytecode.get("object", "")
        if not bytecode.startswith("0x"):
            bytecode = "0x" + bytecode

        if not isinstance(abi, list):
            raise ArtifactNotFound(name, f"{path} has no abi")
        if bytecode == "0x":
            raise ArtifactNotFound(name, f"{path} has no bytecode (abstract contract or interface?)")

        return ContractArtifact(data.get("contractName", name), abi, bytecode, path=path)

    def resolve_factory(self, name, signer):
        return ContractFactory(
            self.load_artifact(name),
            signer,
            self.network,
            confirmation_timeout=self.confirmation_timeout,
            poll_interval=self.poll_interval,
            cancel=self.cancel,
        )


class ContractFactory:
    """Builds, signs and submits deployment transactions for one artifact"""

    def __init__(self, artifact, signer, network, confirmation_timeout=None,
                 poll_interval=2.0, cancel=None):
        self.artifact = artifact
        self.signer = signer
        self.network = network
        self.confirmation_timeout = confirmation_timeout
        self.poll_interval = poll_interval
        self.cancel = cancel

    def build_deployment_transaction(self, *args):
        sender = self.signer.address
        try:
            contract = self.network.contract(self.artifact.abi, bytecode=self.artifact.bytecode)
            transaction = contract.constructor(*args).build_transaction({
                "from": sender,
                "nonce": self.network.get_transaction_count(sender),
                "gasPrice": self.network.gas_price(),
                "chainId": self.network.chain_id,
            })
        except RPCError as e:
            raise SubmissionError(f"Cannot prepare deployment transaction: {e}") from e
        except (*NETWORK_ERRORS, TypeError, ValueError) as e:
            raise SubmissionError(f"Cannot build {self.artifact.name} deployment transaction: {e}") from e

        # Local signing must not see "from"
        transaction.pop("from", None)
        return transaction

    def deploy(self, *args):
        """Submit the deployment and return a pending handle without waiting"""
        transaction = self.build_deployment_transaction(*args)

        try:
            raw_transaction = self.signer.sign_transaction(transaction)
        except (TypeError, ValueError) as e:
            raise SubmissionError(f"Cannot sign deployment transaction: {e}") from e

        try:
            tx_hash = self.network.send_raw_transaction(raw_transaction)
        except RPCError as e:
            raise SubmissionError(f"Failed to send transaction: {e}") from e

        return PendingDeployment(
            tx_hash,
            self.artifact.abi,
            self.network,
            confirmation_timeout=self.confirmation_timeout,
            poll_interval=self.poll_interval,
            cancel=self.cancel,
        )
