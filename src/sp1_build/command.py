"""Build the cargo (or docker) invocation for a program without starting it.

Local builds go to target/elf-compilation, docker builds to
target/elf-compilation/docker, so the two never share build state. Environment
changes are recorded on the SubprocessSpec and only merged at spawn time; the
calling process's own environment is never touched.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from sp1_build.errors import ConfigurationError
from sp1_build.flags import translate
from sp1_build.metadata import PackageMetadata
from sp1_build.options import DOCKER_TARGET_SUBDIR, HELPER_TARGET_SUBDIR, BuildOptions

log = logging.getLogger(__name__)

CC_ENV_VAR = "CC_riscv32im_succinct_zkvm_elf"


@dataclass(frozen=True)
class SubprocessSpec:
    cwd: Path
    program: str
    args: tuple[str, ...] = ()
    env: Mapping[str, str] = field(default_factory=dict)
    env_remove: tuple[str, ...] = ()
    capture_output: bool = True

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]

    def resolve_env(self, base: Mapping[str, str] | None = None) -> dict[str, str]:
        """Copy of base (default os.environ) with overrides applied and removals dropped."""
        env = dict(os.environ if base is None else base)
        env.update(self.env)
        for name in self.env_remove:
            env.pop(name, None)
        return env


ContainerBackend = Callable[[BuildOptions, Path, PackageMetadata], SubprocessSpec]


def canonicalize_program_dir(program_dir: Path) -> Path:
    """Absolute, symlink-free program directory. Raises ConfigurationError if it cannot be resolved."""
    try:
        resolved = Path(program_dir).resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise ConfigurationError(
            "Failed to canonicalize program directory",
            context={"program_dir": program_dir, "error": e},
        ) from e
    if not resolved.is_dir():
        raise ConfigurationError(
            "Program directory is not a directory",
            context={"program_dir": resolved},
        )
    return resolved


def helper_target_dir(metadata: PackageMetadata, use_container: bool) -> Path:
    """Dedicated target dir for program builds, nested one level deeper for docker."""
    target_dir = metadata.target_directory / HELPER_TARGET_SUBDIR
    if use_container:
        target_dir = target_dir / DOCKER_TARGET_SUBDIR
    return target_dir


def default_c_compiler(home: Path | None = None) -> Path:
    """Cross C compiler installed by `sp1up --c-toolchain`."""
    home = Path.home() if home is None else home
    return home / ".sp1" / "bin" / "riscv32-unknown-elf-gcc"


def create_local_command(
    options: BuildOptions,
    program_dir: Path,
    metadata: PackageMetadata,
    environ: Mapping[str, str] | None = None,
    home: Path | None = None,
) -> SubprocessSpec:
    """cargo invocation on the host toolchain."""
    cwd = canonicalize_program_dir(program_dir)
    args, env = translate(options)
    env["CARGO_TARGET_DIR"] = str(helper_target_dir(metadata, use_container=False))

    environ = os.environ if environ is None else environ
    if CC_ENV_VAR not in environ:
        cc_path = default_c_compiler(home)
        if cc_path.exists():
            env[CC_ENV_VAR] = str(cc_path)
        else:
            log.debug("No default C compiler at %s; leaving %s unset", cc_path, CC_ENV_VAR)

    # RUSTC from a parent cargo would make build scripts compile with the host toolchain.
    spec = SubprocessSpec(
        cwd=cwd,
        program="cargo",
        args=tuple(args),
        env=env,
        env_remove=("RUSTC",),
    )
    log.debug("Local build command: %s (cwd=%s)", " ".join(spec.argv), cwd)
    return spec


def create_command(
    options: BuildOptions,
    program_dir: Path,
    metadata: PackageMetadata,
    container_backend: ContainerBackend | None = None,
    environ: Mapping[str, str] | None = None,
    home: Path | None = None,
) -> SubprocessSpec:
    """Local or docker command depending on options.use_container. Backend errors propagate as-is."""
    if options.use_container:
        if container_backend is None:
            from sp1_build.docker import create_docker_command

            container_backend = create_docker_command
        return container_backend(options, program_dir, metadata)
    return create_local_command(options, program_dir, metadata, environ=environ, home=home)
