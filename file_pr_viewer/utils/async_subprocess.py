"""Async subprocess utilities.

Non-blocking process execution for the git and ``gh`` invocations made
during a refresh, so the event loop that triggered the refresh never stalls
on a child process.

Example:
    >>> from file_pr_viewer.utils.async_subprocess import run_command
    >>> stdout, stderr, code = await run_command("git", "rev-parse", "--show-toplevel", cwd="/repo")
    >>> if code == 0:
    ...     print(stdout.strip())
"""

import asyncio
import subprocess
from collections.abc import Mapping
from pathlib import Path


async def run_command(
    *args: str,
    cwd: Path | str | None = None,
    check: bool = True,
    timeout: float | None = None,
    env: Mapping[str, str] | None = None,
) -> tuple[str, str, int]:
    """Run a command asynchronously without shell interpolation.

    Args:
        *args: Executable followed by its arguments.
        cwd: Working directory. None means the current directory.
        check: Raise CalledProcessError on a non-zero exit status.
        timeout: Seconds to wait before the process is killed. None waits
            indefinitely.
        env: Full environment for the child. None inherits the parent's.

    Returns:
        Tuple of (stdout, stderr, return_code). Output is decoded as UTF-8
        with replacement of invalid bytes.

    Raises:
        subprocess.CalledProcessError: If check=True and the command fails.
        TimeoutError: If timeout is exceeded. The process is killed first.
        FileNotFoundError: If the executable is not found.
        PermissionError: If the executable cannot be run.
        NotADirectoryError: If cwd is not a directory.

    Example:
        >>> stdout, _, _ = await run_command(
        ...     "git", "log", "--max-count=25", "--pretty=format:%H", "--", "src/app.py",
        ...     cwd=repo_root,
        ...     timeout=30.0,
        ... )
    """
    process = await asyncio.create_subprocess_exec(
        *args,
        cwd=cwd,
        env=dict(env) if env is not None else None,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(),
            timeout=timeout,
        )
    except (TimeoutError, asyncio.CancelledError):
        process.kill()
        await process.wait()
        raise

    stdout = (stdout_bytes or b"").decode("utf-8", errors="replace")
    stderr = (stderr_bytes or b"").decode("utf-8", errors="replace")

    if check and process.returncode != 0:
        raise subprocess.CalledProcessError(
            process.returncode,
            args,
            stdout,
            stderr,
        )

    return stdout, stderr, process.returncode or 0
