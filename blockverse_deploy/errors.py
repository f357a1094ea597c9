"""Failure taxonomy for the deployment workflow.

Each class marks the step of the workflow where the run stopped. Nothing
in the package retries; the entry point catches ``DeploymentError`` once
and turns it into exit code 1.
"""


class DeploymentError(Exception):
    """Base class for every failure the deployer reports"""


class ConfigurationError(DeploymentError):
    """Invalid configuration or credentials"""


class NoSignerAvailable(DeploymentError):
    """No signing account is configured"""

    def __init__(self, message="No signer available: set DEPLOY_PRIVATE_KEY or DEPLOY_KEYSTORE"):
        super().__init__(message)


class ArtifactNotFound(DeploymentError):
    """A contract artifact could not be resolved"""

    def __init__(self, name, reason=None):
        self.name = name
        self.reason = reason
        message = f"Artifact not found: {name}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class SubmissionError(DeploymentError):
    """The deployment transaction was rejected before it reached a block"""


class ConfirmationError(DeploymentError):
    """The deployment transaction reverted or its status could not be obtained"""

    def __init__(self, message, tx_hash=None):
        self.tx_hash = tx_hash
        super().__init__(message)


class ConfirmationTimeout(ConfirmationError):
    """No receipt arrived before the configured timeout"""


class ReadCallError(DeploymentError):
    """A read-only call against the deployed contract failed"""

    def __init__(self, function, cause):
        self.function = function
        self.cause = cause
        super().__init__(f"Read call {function}() failed: {cause}")


class RPCError(Exception):
    """Transport or JSON-RPC level failure talking to the node

    Not a ``DeploymentError``: the collaborator that sees it wraps it in
    the error for its own step.
    """

    def __init__(self, message, code=None, data=None):
        self.code = code
        self.data = data
        super().__init__(message)
