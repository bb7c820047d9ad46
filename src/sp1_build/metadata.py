"""Read-only package metadata from `cargo metadata`."""

from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from sp1_build.errors import MetadataError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageMetadata:
    target_directory: Path
    root_package_name: str | None = None
    workspace_root: Path | None = None

    @property
    def workspace_dir(self) -> Path:
        """Workspace root, falling back to the directory holding target/."""
        return self.workspace_root if self.workspace_root is not None else self.target_directory.parent


def _root_package(data: dict[str, Any]) -> dict[str, Any] | None:
    """Same rule as cargo: resolve.root when resolved, else the package at workspace_root/Cargo.toml."""
    packages = data.get("packages") or []
    resolve = data.get("resolve")
    if resolve:
        root_id = resolve.get("root")
        if root_id is None:
            return None
        return next((p for p in packages if p.get("id") == root_id), None)
    root_manifest = Path(data.get("workspace_root", "")) / "Cargo.toml"
    return next((p for p in packages if Path(p.get("manifest_path", "")) == root_manifest), None)


def parse_metadata(payload: str) -> PackageMetadata:
    """Parse `cargo metadata --format-version 1` JSON. Raises ValueError on malformed input."""
    data = json.loads(payload)
    if not isinstance(data, dict) or not data.get("target_directory"):
        msg = "cargo metadata output has no target_directory"
        raise ValueError(msg)
    root = _root_package(data)
    workspace_root = data.get("workspace_root")
    return PackageMetadata(
        target_directory=Path(data["target_directory"]),
        root_package_name=root.get("name") if root else None,
        workspace_root=Path(workspace_root) if workspace_root else None,
    )


def load_metadata(manifest_path: Path, cargo: str = "cargo") -> PackageMetadata:
    """Run cargo metadata for manifest_path. Any failure raises MetadataError."""
    cmd = [cargo, "metadata", "--format-version", "1", "--manifest-path", str(manifest_path)]
    log.debug("Loading metadata: %s", " ".join(cmd))
    try:
        r = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        raise MetadataError(
            f"Could not run {cargo} metadata",
            hint="Is cargo installed and in PATH?",
            context={"manifest": manifest_path, "error": e},
        ) from e
    if r.returncode != 0:
        raise MetadataError(
            "cargo metadata failed",
            context={
                "manifest": manifest_path,
                "returncode": r.returncode,
                "stderr": (r.stderr or "").strip()[:2000],
            },
        )
    try:
        return parse_metadata(r.stdout)
    except (ValueError, TypeError, AttributeError) as e:
        raise MetadataError(
            "Invalid cargo metadata output",
            context={"manifest": manifest_path, "error": e},
        ) from e
