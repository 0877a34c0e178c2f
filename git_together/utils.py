import logging
import os
import subprocess
import time
from typing import Any, Dict, List, Mapping, Optional, Tuple

from rich.console import Console
from rich.logging import RichHandler

from git_together.errors import CommandError

__all__ = ["console", "err_console", "logger", "setup_logging", "SubprocessHandler"]

console = Console(highlight=False, soft_wrap=True)

err_console = Console(stderr=True, highlight=False)

logger = logging.getLogger("git_together")


def setup_logging(debug: bool = False) -> None:
    """Send git-together log records to stderr through rich."""
    handler = RichHandler(console=err_console, show_time=False, show_path=debug)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    logger.propagate = False


class SubprocessHandler:
    """Runs git, either captured (for config queries) or attached to the terminal.

    This class encapsulates subprocess operations, ensuring proper resource management
    and consistent error handling across the application.
    """

    def __init__(self, timeout: Optional[int] = None,
                 max_termination_retries: Optional[int] = None,
                 termination_wait: Optional[float] = None) -> None:
        """Initialize the SubprocessHandler with configurable timeout and termination settings.

        Args:
            timeout: Maximum time in seconds to wait for a captured command to complete.
            max_termination_retries: Maximum number of attempts to terminate a process.
            termination_wait: Time to wait between termination attempts in seconds.
        """
        self.timeout: int = timeout or 30
        self.max_termination_retries: int = max_termination_retries or 3
        self.termination_wait: float = termination_wait or 0.5

    @staticmethod
    def create_env(overlay: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """Copy the current environment and apply ``overlay`` on top of it.

        Args:
            overlay: Variables to add or replace.

        Returns:
            Dict[str, str]: Environment variables for the child process.
        """
        env = os.environ.copy()
        if overlay:
            env.update(overlay)
        return env

    def run_command(self, command: List[str], timeout: Optional[int] = None) -> Tuple[str, str, int]:
        """Execute a command with captured output and return it.

        Args:
            command: Command to execute as a list of strings.
            timeout: Maximum time in seconds to wait for the process to complete.

        Returns:
            Tuple[str, str, int]: stdout, stderr, and return code.

        Raises:
            CommandError: If the command cannot be started or times out.
        """
        process: Optional[subprocess.Popen[Any]] = None
        try:
            process = subprocess.Popen(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                env=self.create_env(),
            )
            stdout, stderr = process.communicate(timeout=timeout or self.timeout)
            logger.debug("%s exited with %s", " ".join(command), process.returncode)
            return stdout, stderr, process.returncode
        except subprocess.TimeoutExpired as e:
            self._terminate_process(process)
            raise CommandError(f"command timed out after {timeout or self.timeout} seconds: {' '.join(command)}") from e
        except OSError as e:
            raise CommandError(f"failed to execute '{command[0]}'") from e
        finally:
            self._cleanup_process(process)

    def run_interactive(self, command: List[str], env: Optional[Mapping[str, str]] = None) -> int:
        """Run a command attached to the current terminal and wait for it.

        The child inherits stdin, stdout and stderr so editors and pagers work
        as if git had been started directly.

        Args:
            command: Command to execute as a list of strings.
            env: Environment variables to set on top of the current environment.

        Returns:
            int: The exit code of the command.

        Raises:
            CommandError: If the command cannot be started or is killed by a signal.
        """
        logger.debug("running %s", command)
        process: Optional[subprocess.Popen[Any]] = None
        try:
            process = subprocess.Popen(command, env=self.create_env(env))
            returncode = process.wait()
        except OSError as e:
            raise CommandError(f"failed to execute '{command[0]}'") from e
        except KeyboardInterrupt:
            self._terminate_process(process)
            raise

        if returncode < 0:
            raise CommandError(f"'{command[0]}' was terminated by signal {-returncode}")
        return returncode

    def _terminate_process(self, process: Optional[subprocess.Popen[Any]]) -> None:
        """Terminate a process with multiple attempts if needed.

        Args:
            process: The subprocess.Popen object to terminate.
        """
        if process is None or process.poll() is not None:
            return

        try:
            process.terminate()

            for _ in range(self.max_termination_retries):
                if process.poll() is not None:
                    return
                time.sleep(self.termination_wait)

            if process.poll() is None:
                process.kill()
        except OSError:
            # Process might already be gone
            pass

    def _cleanup_process(self, process: Optional[subprocess.Popen[Any]]) -> None:
        """Close the pipes of a captured process and make sure it is gone.

        Args:
            process: The subprocess.Popen object to clean up.
        """
        if process is None:
            return

        for fd in [process.stdout, process.stderr]:
            if fd is not None:
                try:
                    fd.close()
                except OSError:
                    pass

        self._terminate_process(process)
