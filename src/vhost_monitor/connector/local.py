"""Local Connector - Command execution and file access on this host.

This module handles all process and filesystem access for the agent.
It is read-only: it lists directories, reads files and runs inspection
commands, escalating through sudo only for root-owned paths.
"""

import glob
import os
import shlex
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)

EXIT_TIMEOUT = 124
EXIT_NOT_FOUND = 127
EXIT_OS_ERROR = 255


@dataclass
class CommandResult:
    """Result of a command execution."""

    command: str
    stdout: str
    stderr: str
    exit_code: int
    success: bool = field(init=False)

    def __post_init__(self) -> None:
        self.success = self.exit_code == 0


class LocalConnector:
    """Runs read-only commands and file reads on the local host.

    Example:
        >>> local = LocalConnector(use_sudo=True)
        >>> result = local.run(["openssl", "version"])
        >>> print(result.stdout)
    """

    def __init__(self, use_sudo: bool = True, timeout: float = 30) -> None:
        self.use_sudo = use_sudo
        self.timeout = timeout

    def run(
        self,
        argv: list[str],
        use_sudo: bool = False,
        timeout: float | None = None,
    ) -> CommandResult:
        """Execute a command without a shell.

        Never raises: timeouts and spawn failures are reported through
        the exit code.

        Args:
            argv: Program and arguments.
            use_sudo: Prefix with non-interactive sudo (if enabled and not root).
            timeout: Command timeout in seconds. Defaults to connector timeout.

        Returns:
            CommandResult with stdout, stderr, and exit_code.
        """
        if use_sudo and self.use_sudo and os.geteuid() != 0:
            argv = ["sudo", "-n", *argv]

        command = shlex.join(argv)
        cmd_timeout = timeout if timeout is not None else self.timeout

        try:
            proc = subprocess.run(
                argv,
                capture_output=True,
                timeout=cmd_timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            return CommandResult(
                command=command,
                stdout="",
                stderr=f"timed out after {cmd_timeout}s",
                exit_code=EXIT_TIMEOUT,
            )
        except FileNotFoundError as e:
            return CommandResult(command=command, stdout="", stderr=str(e), exit_code=EXIT_NOT_FOUND)
        except OSError as e:
            return CommandResult(command=command, stdout="", stderr=str(e), exit_code=EXIT_OS_ERROR)

        return CommandResult(
            command=command,
            stdout=proc.stdout.decode("utf-8", errors="replace"),
            stderr=proc.stderr.decode("utf-8", errors="replace"),
            exit_code=proc.returncode,
        )

    def read_file(
        self,
        path: str,
        privileged: bool = False,
        timeout: float | None = None,
    ) -> str | None:
        """Read a text file.

        Args:
            path: Absolute path to the file.
            privileged: Read through `sudo cat` (root-owned trees).
            timeout: Timeout for the privileged read.

        Returns:
            File contents as string, or None if it cannot be read.
        """
        if privileged:
            result = self.run(["cat", path], use_sudo=True, timeout=timeout)
            if result.success:
                return result.stdout
            logger.debug("privileged_read_failed", path=path, error=result.stderr.strip())
            return None

        try:
            return Path(path).read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.debug("read_failed", path=path, error=str(e))
            return None

    def dir_exists(self, path: str) -> bool:
        """Check if a directory exists."""
        return os.path.isdir(path)

    def list_dir(self, path: str) -> list[str]:
        """List directory entries (files and symlinks), sorted.

        Raises:
            OSError: If the directory cannot be listed.
        """
        return sorted(os.listdir(path))

    def find_files(self, root: str, name: str, max_depth: int) -> list[str]:
        """Find files called `name` under `root`, at most `max_depth` deep."""
        result = self.run(["find", root, "-maxdepth", str(max_depth), "-name", name])
        # find exits non-zero on unreadable subdirectories but still lists the rest
        return sorted(line.strip() for line in result.stdout.splitlines() if line.strip())

    def glob_files(self, pattern: str) -> list[str]:
        """Expand a glob pattern to existing files, sorted."""
        return sorted(p for p in glob.glob(pattern) if os.path.isfile(p))
