"""Common utility functions for pattern-ops."""

import shlex
import subprocess
import sys
from pathlib import Path


def log(message: str, verbose: bool = False):
    """Print message only if verbose mode is enabled."""
    if verbose:
        print(message, file=sys.stderr)


def format_command(cmd: list[str]) -> str:
    """Render a command list the way it would be typed in a shell."""
    return shlex.join(str(part) for part in cmd)


def run_command(cmd: list[str], cwd: Path = None, stdout=None, stderr=None, verbose: bool = False) -> int:
    """
    Run an external command and return its exit code.

    Output goes straight to the terminal unless stdout/stderr redirect it
    (e.g. subprocess.DEVNULL).

    Args:
        cmd: Command and arguments
        cwd: Directory to run the command in
        stdout: Where to send the command's stdout
        stderr: Where to send the command's stderr
        verbose: Enable verbose logging

    Returns:
        Exit code of the command, 127 if the executable does not exist,
        126 if it cannot be executed
    """
    log(f"Running: {format_command(cmd)}", verbose)

    try:
        result = subprocess.run(cmd, cwd=cwd, stdout=stdout, stderr=stderr)
    except FileNotFoundError:
        print(f"{cmd[0]}: command not found", file=sys.stderr)
        return 127
    except PermissionError:
        print(f"{cmd[0]}: Permission denied", file=sys.stderr)
        return 126

    return result.returncode


def capture_command(cmd: list[str], cwd: Path = None, verbose: bool = False) -> str:
    """
    Run an external command and return its stripped stdout.

    Raises:
        RuntimeError: If the command fails or cannot be started
    """
    log(f"Running: {format_command(cmd)}", verbose)

    try:
        result = subprocess.run(cmd, cwd=cwd, capture_output=True, text=True)
    except FileNotFoundError:
        raise RuntimeError(f"{cmd[0]}: command not found")

    if result.returncode != 0:
        raise RuntimeError(f"'{format_command(cmd)}' failed with exit code {result.returncode}: {result.stderr.strip()}")

    return result.stdout.strip()
