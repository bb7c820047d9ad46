"""Pytest fixtures for sp1_build tests."""

from pathlib import Path

import pytest

from sp1_build.metadata import PackageMetadata
from sp1_build.options import BUILD_TARGET, HELPER_TARGET_SUBDIR


@pytest.fixture
def program_dir(tmp_path: Path) -> Path:
    """Program crate with a Cargo.toml. Its target dir is tmp_path/program/target."""
    d = tmp_path.resolve() / "program"
    d.mkdir()
    (d / "Cargo.toml").write_text('[package]\nname = "demo"\nversion = "0.1.0"\n')
    return d


@pytest.fixture
def metadata(program_dir: Path) -> PackageMetadata:
    return PackageMetadata(
        target_directory=program_dir / "target",
        root_package_name="demo",
        workspace_root=program_dir,
    )


@pytest.fixture
def seed_elf(metadata: PackageMetadata):
    """Write a fake compiled ELF where cargo would put it. Returns its path."""

    def _seed(name: str, content: bytes = b"\x7fELF demo", docker: bool = False) -> Path:
        release = metadata.target_directory / HELPER_TARGET_SUBDIR
        if docker:
            release = release / "docker"
        release = release / BUILD_TARGET / "release"
        release.mkdir(parents=True, exist_ok=True)
        elf = release / name
        elf.write_bytes(content)
        return elf

    return _seed
