"""
Thin subprocess wrapper for the git calls behind branch and worktree creation.

Every call goes through run_git so failures come back as a GitResult that the
board can show in its status line instead of an exception.
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

GIT_TIMEOUT_SECONDS = 30
GIT_NOT_FOUND = 127


@dataclass
class GitResult:
    """Exit status and captured output of one git invocation."""
    returncode: int
    stdout: str
    stderr: str
    timed_out: bool = False

    @property
    def success(self) -> bool:
        return self.returncode == 0 and not self.timed_out

    @property
    def error(self) -> str:
        """Message for the status line: stderr, else stdout, else the exit code."""
        return self.stderr.strip() or self.stdout.strip() or f"git exited with {self.returncode}"


def run_git(args: list[str], cwd: Path, timeout: int = GIT_TIMEOUT_SECONDS) -> GitResult:
    """Run `git -C <cwd> <args>` and capture its output.

    A missing git binary and a timeout both come back as failed results.
    """
    cmd = ["git", "-C", str(cwd), *args]
    logger.debug(f"Running {' '.join(cmd)}")
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except subprocess.TimeoutExpired:
        logger.warning(f"git {args[0] if args else ''} timed out in {cwd}")
        return GitResult(
            returncode=-1,
            stdout="",
            stderr=f"git {' '.join(args)} timed out after {timeout}s",
            timed_out=True,
        )
    except FileNotFoundError:
        return GitResult(returncode=GIT_NOT_FOUND, stdout="", stderr="git executable not found")

    if proc.returncode != 0:
        logger.debug(f"git {' '.join(args)} exited {proc.returncode}: {proc.stderr.strip()}")
    return GitResult(returncode=proc.returncode, stdout=proc.stdout, stderr=proc.stderr)
