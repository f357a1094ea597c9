import sys
import traceback
from dataclasses import dataclass
from typing import Optional

from .accounts import LocalAccountProvider
from .artifacts import ArtifactRegistry
from .config import DeployConfig
from .console import ConsoleLog
from .contract import call_read_only
from .errors import DeploymentError, NoSignerAvailable, RPCError
from .network import Web3Network
from .units import format_ether

VERIFICATION_CALLS = ("owner", "memberCount", "proposalCount")


@dataclass
class DeploymentResult:
    contract_address: str
    tx_hash: str
    deployer_address: str
    balance_wei: int
    owner: str
    member_count: int
    proposal_count: int
    block_number: Optional[int] = None


@dataclass
class DeploymentOutcome:
    result: Optional[DeploymentResult] = None
    error: Optional[BaseException] = None
    tx_hash: Optional[str] = None

    @property
    def ok(self):
        return self.error is None

    @property
    def exit_code(self):
        return 0 if self.ok else 1


class ProjectDeployer:
    """Handles deployment of the BlockVerseDAO Project contract"""

    def __init__(self, config, accounts, network, registry, log):
        self.config = config
        self.accounts = accounts
        self.network = network
        self.registry = registry
        self.log = log
        self.tx_hash = None

    def acquire_signer(self):
        signers = self.accounts.list_signers()
        if not signers:
            raise NoSignerAvailable()
        signer = signers[0]
        self.log.print(f"Deploying contracts with the account: {signer.address}")
        return signer

    def report_balance(self, signer):
        balance = self.network.get_balance(signer.address)
        self.log.print(f"Account balance: {format_ether(balance)} {self.config.currency_symbol}")
        return balance

    def submit_deployment(self, signer):
        self.log.step(f"Deploying BlockVerseDAO {self.config.contract_name} contract...")
        factory = self.registry.resolve_factory(self.config.contract_name, signer)

        pending = factory.deploy(*self.config.constructor_args)
        self.tx_hash = pending.tx_hash
        self.log.info(f"Transaction sent: {pending.tx_hash}")
        return pending

    def verify_contract(self, contract):
        """Run the read-only checks; any failure aborts the run"""
        return tuple(call_read_only(contract, name) for name in VERIFICATION_CALLS)

    def deploy(self):
        """
        Main deployment process
        """
        self.log.print("Starting deployment...")

        # Step 1-2: signer and its balance
        signer = self.acquire_signer()
        balance = self.report_balance(signer)

        # Step 3-4: resolve artifact and submit
        pending = self.submit_deployment(signer)

        # Step 5-6: wait for the receipt and resolve the address
        contract = pending.wait_for_deployment()
        address = pending.get_address()

        # Step 7: verification queries
        owner, member_count, proposal_count = self.verify_contract(contract)

        result = DeploymentResult(
            contract_address=address,
            tx_hash=pending.tx_hash,
            deployer_address=signer.address,
            balance_wei=balance,
            owner=owner,
            member_count=member_count,
            proposal_count=proposal_count,
            block_number=_block_number(pending.receipt),
        )

        # Step 8: report
        self.print_deployment_summary(result)
        return result

    def print_deployment_summary(self, result):
        """Print deployment summary"""
        self.log.print(f"\n✅ BlockVerseDAO {self.config.contract_name} contract deployed successfully!")
        self.log.print(f"📍 Contract Address: {result.contract_address}")
        self.log.print(f"🔗 Network: {self.config.network_name}")
        self.log.print(f"🌐 RPC URL: {self.config.rpc_url}")

        self.log.print("\n📋 Contract Details:")
        self.log.print(f"- Owner: {result.owner}")
        self.log.print(f"- Member Count: {result.member_count}")
        self.log.print(f"- Proposal Count: {result.proposal_count}")

        self.log.print("\n📝 Save this information:")
        self.log.rule(width=32)
        self.log.print(f"CONTRACT_ADDRESS={result.contract_address}")
        self.log.rule(width=32)

        self.log.print("\n🎉 Deployment completed successfully!")


def _block_number(receipt):
    if not receipt or receipt.get("blockNumber") is None:
        return None
    value = receipt["blockNumber"]
    return value if isinstance(value, int) else int(value, 16)


def run_deployment(config, accounts=None, network=None, registry=None, log=None, cancel=None):
    """
    Run the full deployment workflow and return its outcome

    Collaborators not passed in are built from ``config``. Nothing here
    exits the process; ``main`` maps the outcome to an exit code.
    """
    log = log or ConsoleLog(log_file=config.log_file)
    owns_network = network is None

    deployer = None
    try:
        if network is None:
            network = Web3Network.from_config(config, log)
        if accounts is None:
            accounts = LocalAccountProvider(config)
        if registry is None:
            registry = ArtifactRegistry(
                config.artifacts_dir,
                network,
                confirmation_timeout=config.confirmation_timeout,
                poll_interval=config.poll_interval,
                cancel=cancel,
            )

        deployer = ProjectDeployer(config, accounts, network, registry, log)
        result = deployer.deploy()
        return DeploymentOutcome(result=result, tx_hash=result.tx_hash)

    except Exception as e:
        tx_hash = deployer.tx_hash if deployer is not None else None
        report_failure(log, e, tx_hash)
        return DeploymentOutcome(error=e, tx_hash=tx_hash)

    finally:
        if owns_network and network is not None:
            network.close()


def report_failure(log, error, tx_hash=None):
    log.error("❌ Deployment failed:")
    log.error(f"[ERROR] {type(error).__name__}: {error}")
    if tx_hash:
        log.error(f"[INFO] Deployment transaction was submitted: {tx_hash}")
    if not isinstance(error, (DeploymentError, RPCError)):
        log.error("".join(traceback.format_exception(type(error), error, error.__traceback__)))


def main(environ=None):
    """Main entry point"""
    try:
        config = DeployConfig.from_env(environ)
        outcome = run_deployment(config)
    except DeploymentError as e:
        report_failure(ConsoleLog(), e)
        return 1
    except KeyboardInterrupt:
        ConsoleLog().error("❌ Deployment failed:\n[ERROR] Interrupted")
        return 1
    return outcome.exit_code


def cli():
    sys.exit(main())
