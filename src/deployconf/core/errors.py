from __future__ import annotations

from typing import List, Optional

PHASE_NORMALIZE = "normalize"
PHASE_READ = "read"
PHASE_RENDER = "render"
PHASE_PARSE = "parse"
PHASE_IMPORT = "import-resolve"
PHASE_MERGE = "merge"
PHASE_BIND = "bind"


class DeployConfError(Exception):
    """Base class for every failure raised while loading a configuration.

    Carries the file that failed (``path``), the phase it failed in and the
    chain of files through which that file was imported, nearest importer
    first.
    """

    phase: str = PHASE_IMPORT

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        phase: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        if phase is not None:
            self.phase = phase
        self.import_chain: List[str] = []

    def add_importer(self, path: str) -> None:
        """Record that the failing file was reached through *path*."""
        self.import_chain.append(path)

    def __str__(self) -> str:
        text = f"{self.phase} failed"
        if self.path:
            text += f" for {self.path}"
        text += f": {self.message}"
        if self.import_chain:
            text += f" (imported via {' <- '.join(self.import_chain)})"
        return text


class ReadError(DeployConfError):
    """Raised when a configuration file cannot be read."""

    phase = PHASE_READ


class TemplateError(DeployConfError):
    """Raised when a file cannot be rendered against its import data."""

    phase = PHASE_RENDER


class ParseError(DeployConfError):
    """Raised when rendered text is not a valid YAML/JSON mapping."""

    phase = PHASE_PARSE


class PatternError(DeployConfError):
    """Raised for malformed or unsupported glob patterns."""

    phase = PHASE_IMPORT


class ConfigError(DeployConfError):
    """Raised for invalid import declarations, settings or bound configs."""

    phase = PHASE_IMPORT


class ImportCycleError(ConfigError):
    """Raised when a file transitively imports itself."""

    def __init__(self, cycle: List[str]) -> None:
        super().__init__(
            "import cycle detected: " + " -> ".join(cycle),
            path=cycle[-1] if cycle else None,
        )
        self.cycle = list(cycle)


class BindError(ConfigError):
    """Raised when the merged tree does not fit the typed configuration."""

    phase = PHASE_BIND


class MergeError(DeployConfError):
    """Raised when two trees cannot be merged because their shapes differ."""

    phase = PHASE_MERGE
