"""Reproducible builds inside the ghcr.io/succinctlabs/sp1 image."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from sp1_build.command import SubprocessSpec, canonicalize_program_dir
from sp1_build.errors import ConfigurationError, ContainerUnavailableError
from sp1_build.flags import get_program_build_args, toolchain_env
from sp1_build.metadata import PackageMetadata
from sp1_build.options import DOCKER_TARGET_SUBDIR, HELPER_TARGET_SUBDIR, BuildOptions

log = logging.getLogger(__name__)

DOCKER_IMAGE = "ghcr.io/succinctlabs/sp1"
CONTAINER_MOUNT = "/root/program"
DOCKER_PLATFORM = "linux/amd64"


def get_docker_image(tag: str) -> str:
    return f"{DOCKER_IMAGE}:{tag}"


def ensure_docker_available(docker: str = "docker") -> None:
    """Raise ContainerUnavailableError unless `docker info` succeeds."""
    try:
        r = subprocess.run([docker, "info"], capture_output=True, text=True)
    except OSError as e:
        raise ContainerUnavailableError(
            "docker is not installed",
            hint="Install docker: https://docs.docker.com/get-docker/",
            context={"error": e},
        ) from e
    if r.returncode != 0:
        raise ContainerUnavailableError(
            "docker is not running",
            hint="Start the docker daemon and retry.",
            context={"stderr": (r.stderr or "").strip()[:500]},
        )


def _container_path(path: Path, workspace_root: Path, what: str) -> str:
    """Map a host path under workspace_root to its location in the container mount."""
    try:
        rel = path.relative_to(workspace_root)
    except ValueError as e:
        raise ConfigurationError(
            f"{what} is outside the workspace mounted into docker",
            context={what: path, "workspace_root": workspace_root},
        ) from e
    return f"{CONTAINER_MOUNT}/{rel.as_posix()}" if rel.parts else CONTAINER_MOUNT


def create_docker_command(
    options: BuildOptions,
    program_dir: Path,
    metadata: PackageMetadata,
) -> SubprocessSpec:
    """`docker run` that builds the program with the workspace mounted at /root/program."""
    ensure_docker_available()
    program_dir = canonicalize_program_dir(program_dir)
    # cargo reports paths unresolved; compare them in the same symlink-free form as program_dir.
    workspace_root = metadata.workspace_dir.resolve()
    target_directory = metadata.target_directory.resolve()

    workdir = _container_path(program_dir, workspace_root, "program_dir")
    target_dir = "/".join(
        [
            _container_path(target_directory, workspace_root, "target_directory"),
            HELPER_TARGET_SUBDIR,
            DOCKER_TARGET_SUBDIR,
        ]
    )

    # docker does not inherit the host env; everything goes through -e.
    env = dict(toolchain_env(), CARGO_TARGET_DIR=target_dir)
    env_args = [x for k, v in env.items() for x in ("-e", f"{k}={v}")]
    args = [
        "run",
        "--rm",
        "--platform",
        DOCKER_PLATFORM,
        "-v",
        f"{workspace_root}:{CONTAINER_MOUNT}",
        *env_args,
        "-w",
        workdir,
        get_docker_image(options.container_tag),
        "cargo",
        *get_program_build_args(options),
    ]
    spec = SubprocessSpec(cwd=program_dir, program="docker", args=tuple(args))
    log.debug("Docker build command: %s", " ".join(spec.argv))
    return spec
