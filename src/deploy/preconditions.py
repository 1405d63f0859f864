"""Tool and login checks that must pass before anything is created."""

from src.clients.azure import AzureCLI
from src.clients.runner import CommandRunner
from src.deploy.errors import PreconditionError
from src.logging.events import get_logger

STEP = "preconditions"

# Executable name -> display name
REQUIRED_TOOLS = {
    "az": "Azure CLI",
    "kubectl": "kubectl",
    "jq": "jq",
}


def check_preconditions(runner: CommandRunner) -> None:
    """Raise PreconditionError on the first missing tool or absent Azure login."""
    logger = get_logger()

    for executable, display_name in REQUIRED_TOOLS.items():
        if runner.which(executable) is None:
            raise PreconditionError(STEP, executable, f"{display_name} is not installed")
        logger.info(f"{display_name} found")

    if not AzureCLI(runner).is_logged_in():
        raise PreconditionError(STEP, "az", "not logged in to Azure; run 'az login' first")
    logger.info("Azure login verified")
