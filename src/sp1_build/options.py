"""Build options and the fixed target constants they are resolved against."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

# Changing any of these changes the generated paths for downstream consumers.
BUILD_TARGET = "riscv32im-succinct-zkvm-elf"
DEFAULT_TAG = "v1.1.0"
DEFAULT_OUTPUT_DIR = "elf"
HELPER_TARGET_SUBDIR = "elf-compilation"
DOCKER_TARGET_SUBDIR = "docker"


@dataclass(frozen=True)
class BuildOptions:
    """User-supplied build options. Empty string and None mean the same for names."""

    use_container: bool = False
    container_tag: str = DEFAULT_TAG
    features: tuple[str, ...] = field(default_factory=tuple)
    no_default_features: bool = False
    ignore_toolchain_version_check: bool = False
    locked: bool = False
    binary_name: str | None = ""
    artifact_name: str | None = ""
    output_directory: str = DEFAULT_OUTPUT_DIR

    def __post_init__(self) -> None:
        # Frozen: normalise through object.__setattr__.
        object.__setattr__(self, "features", tuple(self.features))
        if not self.container_tag:
            object.__setattr__(self, "container_tag", DEFAULT_TAG)
        if not self.output_directory:
            object.__setattr__(self, "output_directory", DEFAULT_OUTPUT_DIR)

    @classmethod
    def from_config(cls, config: Mapping[str, Any], **overrides: Any) -> BuildOptions:
        """Options from a resolved build config; overrides that are None are treated as not given."""
        values: dict[str, Any] = {
            "use_container": bool(config.get("docker", False)),
            "container_tag": str(config.get("tag") or DEFAULT_TAG),
            "features": tuple(config.get("features") or ()),
            "no_default_features": bool(config.get("no_default_features", False)),
            "ignore_toolchain_version_check": bool(config.get("ignore_rust_version", False)),
            "locked": bool(config.get("locked", False)),
            "binary_name": str(config.get("binary") or ""),
            "artifact_name": str(config.get("elf_name") or ""),
            "output_directory": str(config.get("output_directory") or DEFAULT_OUTPUT_DIR),
        }
        for key, value in overrides.items():
            if key not in values:
                msg = f"Unknown build option: {key}"
                raise TypeError(msg)
            if value is not None:
                values[key] = value
        return cls(**values)
