"""Build errors carrying a hint and the context needed to diagnose without re-running."""

from __future__ import annotations

from collections.abc import Mapping


class BuildError(Exception):
    """Base error for the build pipeline."""

    hint: str | None
    context: dict[str, str]

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(message)
        self.hint = hint
        self.context = {k: str(v) for k, v in (context or {}).items()}

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        for k, v in self.context.items():
            if v:
                parts.append(f"  {k}: {v}")
        return "\n".join(parts)


class ConfigurationError(BuildError):
    """Bad or unresolvable input: program directory, config file, workspace layout."""


class ContainerUnavailableError(ConfigurationError):
    """Docker is not installed or its daemon is not reachable."""


class MetadataError(BuildError):
    """`cargo metadata` failed. Fatal, never retried."""


class SpawnError(BuildError):
    """The build subprocess could not be started."""


class ArtifactError(BuildError):
    pass


class MissingPackageNameError(ArtifactError):
    pass


class DirectoryCreationError(ArtifactError):
    pass


class ArtifactNotFoundError(ArtifactError):
    pass


class CopyError(ArtifactError):
    pass


class ProcessFailure(Exception):
    """Build subprocess exited non-zero.

    Its diagnostics were already relayed to the console, so this carries only the
    exit code. Deliberately not a BuildError: callers must not print it again.
    """

    def __init__(self, returncode: int) -> None:
        super().__init__()
        self.returncode = returncode


__all__ = [
    "ArtifactError",
    "ArtifactNotFoundError",
    "BuildError",
    "ConfigurationError",
    "ContainerUnavailableError",
    "CopyError",
    "DirectoryCreationError",
    "MetadataError",
    "MissingPackageNameError",
    "ProcessFailure",
    "SpawnError",
]
