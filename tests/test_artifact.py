"""Tests for sp1_build.artifact."""

from pathlib import Path
from unittest.mock import patch

import pytest

from sp1_build.artifact import (
    ArtifactLocation,
    copy_artifact,
    copy_elf_to_output_dir,
    destination_file_name,
    resolve_artifact_location,
    source_file_name,
)
from sp1_build.errors import (
    ArtifactNotFoundError,
    CopyError,
    DirectoryCreationError,
    MissingPackageNameError,
)
from sp1_build.metadata import PackageMetadata
from sp1_build.options import BUILD_TARGET, BuildOptions


class TestNames:
    def test_package_name_scenario(self, metadata: PackageMetadata) -> None:
        options = BuildOptions(binary_name="", artifact_name="", use_container=False)
        assert source_file_name(options, metadata) == "demo"
        assert destination_file_name(options) == BUILD_TARGET

    def test_binary_name_wins_for_source(self, metadata: PackageMetadata) -> None:
        assert source_file_name(BuildOptions(binary_name="prog"), metadata) == "prog"

    def test_missing_package_name(self, tmp_path: Path) -> None:
        virtual = PackageMetadata(target_directory=tmp_path / "target", root_package_name=None)
        with pytest.raises(MissingPackageNameError) as exc:
            source_file_name(BuildOptions(), virtual)
        assert str(tmp_path / "target") in str(exc.value)

    def test_artifact_name_beats_binary_name(self) -> None:
        assert destination_file_name(BuildOptions(artifact_name="out", binary_name="prog")) == "out"

    def test_binary_name_used_for_destination(self) -> None:
        assert destination_file_name(BuildOptions(binary_name="prog")) == "prog"

    def test_destination_never_package_name(self) -> None:
        assert destination_file_name(BuildOptions(binary_name=None, artifact_name=None)) == BUILD_TARGET


class TestResolveArtifactLocation:
    def test_local_source_path(self, metadata: PackageMetadata) -> None:
        loc = resolve_artifact_location(BuildOptions(), metadata)
        assert loc.source == (
            metadata.target_directory / "elf-compilation" / BUILD_TARGET / "release" / "demo"
        )
        assert loc.destination == metadata.target_directory.parent / "elf" / BUILD_TARGET

    def test_container_inserts_exactly_one_segment(self, metadata: PackageMetadata) -> None:
        local = resolve_artifact_location(BuildOptions(), metadata).source
        docker = resolve_artifact_location(BuildOptions(use_container=True), metadata).source
        assert len(docker.parts) == len(local.parts) + 1
        i = docker.parts.index("elf-compilation")
        assert docker.parts[i + 1] == "docker"
        assert docker.parts[: i + 1] + docker.parts[i + 2 :] == local.parts

    def test_destination_unaffected_by_container(self, metadata: PackageMetadata) -> None:
        local = resolve_artifact_location(BuildOptions(), metadata).destination
        docker = resolve_artifact_location(BuildOptions(use_container=True), metadata).destination
        assert local == docker

    def test_absolute_output_directory(self, metadata: PackageMetadata, tmp_path: Path) -> None:
        out = tmp_path / "abs-out"
        loc = resolve_artifact_location(BuildOptions(output_directory=str(out)), metadata)
        assert loc.destination == out / BUILD_TARGET


class TestCopy:
    def test_copies_and_creates_directory(self, metadata: PackageMetadata, seed_elf) -> None:
        src = seed_elf("demo", b"\x7fELF bytes")
        options = BuildOptions(output_directory="nested/elf/dir")
        dest = copy_elf_to_output_dir(options, metadata)
        assert dest == metadata.target_directory.parent / "nested/elf/dir" / BUILD_TARGET
        assert dest.read_bytes() == src.read_bytes()

    def test_second_run_with_existing_directory_overwrites(
        self, metadata: PackageMetadata, seed_elf
    ) -> None:
        seed_elf("demo", b"first")
        dest = copy_elf_to_output_dir(BuildOptions(), metadata)
        seed_elf("demo", b"second")
        assert copy_elf_to_output_dir(BuildOptions(), metadata) == dest
        assert dest.read_bytes() == b"second"

    def test_missing_source(self, metadata: PackageMetadata) -> None:
        with pytest.raises(ArtifactNotFoundError) as exc:
            copy_elf_to_output_dir(BuildOptions(binary_name="nope"), metadata)
        assert "nope" in exc.value.context["expected"]

    def test_docker_build_does_not_find_local_elf(self, metadata: PackageMetadata, seed_elf) -> None:
        seed_elf("demo")
        with pytest.raises(ArtifactNotFoundError):
            copy_elf_to_output_dir(BuildOptions(use_container=True), metadata)

    def test_directory_creation_failure(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not a directory")
        loc = ArtifactLocation(source=tmp_path / "src", destination=blocker / "sub" / "elf")
        with pytest.raises(DirectoryCreationError):
            copy_artifact(loc)

    def test_copy_failure(self, tmp_path: Path) -> None:
        src = tmp_path / "src"
        src.write_bytes(b"x")
        loc = ArtifactLocation(source=src, destination=tmp_path / "out" / "elf")
        with patch("sp1_build.artifact.shutil.copyfile", side_effect=PermissionError("denied")):
            with pytest.raises(CopyError) as exc:
                copy_artifact(loc)
        assert "denied" in str(exc.value)
