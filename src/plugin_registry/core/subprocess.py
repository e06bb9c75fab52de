"""Subprocess execution with enriched error reporting for external toolchains."""

import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path


def run_subprocess_with_context(
    cmd: Sequence[str],
    operation_context: str,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run a command to completion, capturing combined output.

    Wraps subprocess.run() to catch CalledProcessError and re-raise as RuntimeError
    with operation context, captured output, and command details.

    Args:
        cmd: Command and arguments to execute
        operation_context: Human-readable description of operation
        cwd: Working directory for command execution
        env: Full environment for the child process (inherits ours if None)

    Returns:
        CompletedProcess instance from subprocess.run()

    Raises:
        RuntimeError: If the command fails or its binary is not found
    """
    cmd_str = " ".join(str(arg) for arg in cmd)
    try:
        return subprocess.run(
            cmd,
            cwd=cwd,
            env=None if env is None else dict(env),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=True,
        )

    except subprocess.CalledProcessError as e:
        error_msg = f"Failed to {operation_context}"
        error_msg += f"\nCommand: {cmd_str}"
        error_msg += f"\nExit code: {e.returncode}"

        if e.stdout:
            output_text = e.stdout
            if isinstance(output_text, bytes):
                output_text = output_text.decode("utf-8", errors="replace")
            output_stripped = output_text.strip()
            if output_stripped:
                error_msg += f"\noutput: {output_stripped}"

        raise RuntimeError(error_msg) from e

    except FileNotFoundError as e:
        error_msg = f"Command not found while trying to {operation_context}: {cmd[0]}"
        error_msg += f"\nFull command: {cmd_str}"
        raise RuntimeError(error_msg) from e
