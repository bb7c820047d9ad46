"""Build an SP1 program: metadata -> command -> run -> copy ELF."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from pathlib import Path

from sp1_build.artifact import copy_elf_to_output_dir
from sp1_build.command import ContainerBackend, create_command
from sp1_build.metadata import PackageMetadata, load_metadata
from sp1_build.options import BuildOptions
from sp1_build.runner import execute_command

log = logging.getLogger(__name__)

Runner = Callable[..., None]  # (spec, is_containerized, env=None)


def build_program(
    options: BuildOptions,
    program_dir: Path | None = None,
    *,
    metadata_loader: Callable[[Path], PackageMetadata] | None = None,
    container_backend: ContainerBackend | None = None,
    runner: Runner | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path:
    """Build the program in program_dir (default: cwd) and return the path of the copied ELF.

    One linear attempt: every error propagates, including ProcessFailure when
    cargo exits non-zero (its diagnostics are already on the console).
    environ (default os.environ) is both consulted for the default C compiler and
    used as the child's base environment.
    """
    if metadata_loader is None:
        metadata_loader = load_metadata
    if runner is None:
        runner = execute_command

    program_dir = Path.cwd() if program_dir is None else Path(program_dir)
    manifest = program_dir / "Cargo.toml"
    metadata = metadata_loader(manifest)
    log.debug(
        "Metadata: target_directory=%s root_package=%s",
        metadata.target_directory,
        metadata.root_package_name,
    )

    spec = create_command(
        options,
        program_dir,
        metadata,
        container_backend=container_backend,
        environ=environ,
    )
    runner(spec, options.use_container, env=environ)

    elf_path = copy_elf_to_output_dir(options, metadata)
    log.debug("ELF ready at %s", elf_path)
    return elf_path
