"""Thin subprocess wrapper used by the az and kubectl clients."""

import shutil
import subprocess
from dataclasses import dataclass

from src.logging.events import get_logger


@dataclass
class CommandResult:
    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """Runs external commands without a shell and captures their output."""

    def which(self, name: str) -> str | None:
        return shutil.which(name)

    def run(
        self,
        args: list[str],
        input: str | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        get_logger().debug("Running command", extra={"audit_data": {"command": " ".join(args)}})
        try:
            proc = subprocess.run(
                args,
                input=input,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            return CommandResult(args=args, returncode=124, stderr=f"timed out after {e.timeout}s")
        except OSError as e:
            return CommandResult(args=args, returncode=127, stderr=str(e))
        return CommandResult(
            args=args,
            returncode=proc.returncode,
            stdout=proc.stdout,
            stderr=proc.stderr,
        )
