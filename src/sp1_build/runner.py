"""Run a build subprocess, relaying its output line by line with an [sp1] prefix."""

from __future__ import annotations

import logging
import subprocess
import sys
import threading
from collections.abc import Mapping
from typing import IO, TextIO

from sp1_build.command import SubprocessSpec
from sp1_build.errors import ProcessFailure, SpawnError

log = logging.getLogger(__name__)


def output_prefix(is_containerized: bool) -> str:
    return "[sp1] [docker]" if is_containerized else "[sp1]"


def _relay(stream: IO[str], prefix: str, out: TextIO) -> None:
    """Copy each line of stream to out, whole, prefixed.

    stream is always drained to EOF; after a failed write the rest is dropped.
    """
    writable = True
    for line in stream:
        if not writable:
            continue
        try:
            print(prefix, line.rstrip("\r\n"), file=out, flush=True)
        except (OSError, ValueError) as e:
            writable = False
            log.debug("Dropping relayed output after write error: %s", e)


def execute_command(
    spec: SubprocessSpec,
    is_containerized: bool,
    env: Mapping[str, str] | None = None,
) -> None:
    """Run spec to completion. Raises SpawnError if it cannot start, ProcessFailure on non-zero exit.

    stdout is drained on a worker thread while this thread drains stderr, so a
    child blocked on one full pipe can never deadlock us.
    """
    pipe = subprocess.PIPE if spec.capture_output else None
    log.debug("Spawning %s (cwd=%s)", " ".join(spec.argv), spec.cwd)
    try:
        process = subprocess.Popen(
            spec.argv,
            cwd=str(spec.cwd),
            env=spec.resolve_env(env),
            stdout=pipe,
            stderr=pipe,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as e:
        raise SpawnError(
            "failed to spawn command",
            context={"program": spec.program, "cwd": spec.cwd, "error": e},
        ) from e

    prefix = output_prefix(is_containerized)
    stdout_thread = None
    if process.stdout is not None:
        stdout_thread = threading.Thread(
            target=_relay,
            args=(process.stdout, prefix, sys.stdout),
            name="sp1-stdout-relay",
            daemon=True,
        )
        stdout_thread.start()
    if process.stderr is not None:
        _relay(process.stderr, prefix, sys.stderr)
    if stdout_thread is not None:
        stdout_thread.join()

    returncode = process.wait()
    for stream in (process.stdout, process.stderr):
        if stream is not None:
            stream.close()
    log.debug("%s exited with %s", spec.program, returncode)
    if returncode != 0:
        # Killed by a signal: no exit code of its own.
        raise ProcessFailure(returncode if returncode > 0 else 1)
