"""Cross-compile SP1 programs for riscv32im-succinct-zkvm-elf, locally or in docker."""

from .artifact import ArtifactLocation, copy_elf_to_output_dir, resolve_artifact_location
from .build import build_program
from .command import SubprocessSpec, create_command, create_local_command
from .flags import get_program_build_args, get_rust_compiler_flags, translate
from .metadata import PackageMetadata, load_metadata
from .options import BUILD_TARGET, DEFAULT_OUTPUT_DIR, DEFAULT_TAG, BuildOptions
from .runner import execute_command

__all__ = [
    "BUILD_TARGET",
    "DEFAULT_OUTPUT_DIR",
    "DEFAULT_TAG",
    "ArtifactLocation",
    "BuildOptions",
    "PackageMetadata",
    "SubprocessSpec",
    "build_program",
    "copy_elf_to_output_dir",
    "create_command",
    "create_local_command",
    "execute_command",
    "get_program_build_args",
    "get_rust_compiler_flags",
    "load_metadata",
    "resolve_artifact_location",
    "translate",
]
