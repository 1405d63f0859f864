"""Fatal deployment errors.

Every error names the pipeline step that failed and the tool or resource
involved, so the CLI can report it and exit non-zero.
"""


class DeployError(Exception):
    """Base class for errors that halt the pipeline."""

    def __init__(self, step: str, resource: str, message: str):
        self.step = step
        self.resource = resource
        self.message = message
        super().__init__(f"[{step}] {resource}: {message}")


class PreconditionError(DeployError):
    """A required tool is missing or the operator is not logged in."""


class InputError(DeployError):
    """The input file or a template is missing or malformed."""


class ProvisioningError(DeployError):
    """A cloud resource failed to create or did not become ready in time."""


class RolloutError(DeployError):
    """A workload failed to roll out or its service got no external address."""
