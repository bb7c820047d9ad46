"""Locate the compiled ELF in the toolchain's target dir and copy it to the output directory."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from sp1_build.command import helper_target_dir
from sp1_build.errors import (
    ArtifactNotFoundError,
    CopyError,
    DirectoryCreationError,
    MissingPackageNameError,
)
from sp1_build.metadata import PackageMetadata
from sp1_build.options import BUILD_TARGET, BuildOptions

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArtifactLocation:
    source: Path
    destination: Path


def source_file_name(options: BuildOptions, metadata: PackageMetadata) -> str:
    """File name cargo gives the ELF: the binary if given, else the root package."""
    if options.binary_name:
        return options.binary_name
    if metadata.root_package_name:
        return metadata.root_package_name
    raise MissingPackageNameError(
        "No binary specified and the workspace has no root package",
        hint="Pass --binary to pick the program to build.",
        context={"target_directory": metadata.target_directory},
    )


def destination_file_name(options: BuildOptions) -> str:
    """--elf-name, else --binary, else BUILD_TARGET. Never the package name."""
    # TODO: fall back to the package name once downstream docs and examples are updated.
    if options.artifact_name:
        return options.artifact_name
    if options.binary_name:
        return options.binary_name
    return BUILD_TARGET


def resolve_artifact_location(options: BuildOptions, metadata: PackageMetadata) -> ArtifactLocation:
    source = (
        helper_target_dir(metadata, options.use_container)
        / BUILD_TARGET
        / "release"
        / source_file_name(options, metadata)
    )
    elf_dir = metadata.target_directory.parent / options.output_directory
    return ArtifactLocation(source=source, destination=elf_dir / destination_file_name(options))


def copy_artifact(location: ArtifactLocation) -> Path:
    """Copy source over destination, creating the destination directory. Returns destination."""
    elf_dir = location.destination.parent
    try:
        elf_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryCreationError(
            "Could not create output directory",
            context={"output_directory": elf_dir, "error": e},
        ) from e

    if not location.source.is_file():
        raise ArtifactNotFoundError(
            "Compiled ELF not found",
            hint="Check that --binary and --docker match the build that just ran.",
            context={"expected": location.source},
        )

    try:
        shutil.copyfile(location.source, location.destination)
        shutil.copymode(location.source, location.destination)
    except OSError as e:
        raise CopyError(
            "Could not copy ELF",
            context={"source": location.source, "destination": location.destination, "error": e},
        ) from e
    log.debug("Copied %s -> %s", location.source, location.destination)
    return location.destination


def copy_elf_to_output_dir(options: BuildOptions, metadata: PackageMetadata) -> Path:
    return copy_artifact(resolve_artifact_location(options, metadata))
