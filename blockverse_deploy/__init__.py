"""Deploy and verify the BlockVerseDAO Project contract on an EVM network."""

from .config import DeployConfig
from .deployer import DeploymentOutcome, DeploymentResult, ProjectDeployer, main, run_deployment
from .errors import (
    ArtifactNotFound,
    ConfigurationError,
    ConfirmationError,
    ConfirmationTimeout,
    DeploymentError,
    NoSignerAvailable,
    ReadCallError,
    RPCError,
    SubmissionError,
)
from .units import format_ether

__version__ = "0.1.0"

__all__ = [
    "ArtifactNotFound",
    "ConfigurationError",
    "ConfirmationError",
    "ConfirmationTimeout",
    "DeployConfig",
    "DeploymentError",
    "DeploymentOutcome",
    "DeploymentResult",
    "NoSignerAvailable",
    "ProjectDeployer",
    "ReadCallError",
    "RPCError",
    "SubmissionError",
    "format_ether",
    "main",
    "run_deployment",
]
