"""Secret loading through the pattern's vault utilities."""

from pathlib import Path
from .helm_executor import SCRIPTS_DIR
from .utils import run_command


def push_secrets(workdir: Path, name: str, verbose: bool = False) -> int:
    """Push the pattern's secrets into the vault."""
    cmd = [f"{SCRIPTS_DIR}/vault-utils.sh", "push_secrets", name]
    return run_command(cmd, cwd=workdir, verbose=verbose)
