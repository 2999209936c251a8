"""
Core Interfaces for the Installer Download Pipeline

This module defines the data structures passed between pipeline stages and
the interfaces behind which transport and optional local tools are hidden.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from zipkin_quickstart.constants import LATEST_VERSION

Pathish = Union[str, Path]


@dataclass(frozen=True)
class ArtifactCoordinate:
    """Identifies one downloadable artifact in a Maven repository."""

    group: str
    """Maven group, dot separated (e.g., 'io.zipkin.java')"""

    artifact_id: str
    """Artifact id (e.g., 'zipkin-server')"""

    version: str
    """Concrete version or the LATEST sentinel (any case)"""

    classifier: str = ""
    """Build variant such as 'exec' or 'module'; empty for none"""

    @property
    def is_latest(self) -> bool:
        return self.version.lower() == LATEST_VERSION.lower()

    def with_version(self, version: str) -> "ArtifactCoordinate":
        """Return a copy of this coordinate pinned to `version`."""
        return replace(self, version=version)

    def __str__(self) -> str:
        return f"{self.group}:{self.artifact_id}:{self.version}:{self.classifier}"


@dataclass(frozen=True)
class ResolvedArtifact:
    """An artifact whose version has been validated and whose URL is known."""

    coordinate: ArtifactCoordinate
    url: str
    local_filename: str


class VerificationStatus(Enum):
    PASSED = "passed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class VerificationResult:
    """Result of a single checksum or signature verification step."""

    status: VerificationStatus
    """Outcome of the step"""

    path: Optional[str] = None
    """Local file that was verified"""

    message: Optional[str] = None
    """Human readable explanation, mostly for skips and failures"""

    manual_verification_requested: bool = False
    """Whether the user was told to finish this verification by hand"""

    side_files: List[str] = field(default_factory=list)
    """Side-files this step wrote to disk"""

    @property
    def failed(self) -> bool:
        return self.status is VerificationStatus.FAILED


@dataclass
class PipelineOutcome:
    """Result of one installer run."""

    success: bool
    """Whether the artifact was downloaded and no verification failed"""

    primary_file_path: Optional[str] = None
    """Path of the downloaded artifact"""

    diagnostics: List[str] = field(default_factory=list)
    """Ordered messages describing what happened"""

    manual_verification_requested: bool = False
    """Set when side-files were kept so the user can verify them by hand"""

    side_files: List[str] = field(default_factory=list)
    """Verification side-files left on disk after the run"""

    artifact: Optional[ResolvedArtifact] = None
    """The located artifact, once known"""

    error: Optional[Exception] = None
    """The error that aborted the run, if any"""


class Transport(ABC):
    """Fetches remote resources; the only network primitive of the pipeline."""

    @abstractmethod
    def fetch(self, url: str, destination: Pathish) -> Path:
        """
        Download `url` to `destination`, overwriting it.

        Returns:
            Path: The written destination.

        Raises:
            TransportError: If the request fails or the file cannot be written.
        """

    @abstractmethod
    def get_json(self, url: str, params: Optional[Dict[str, str]] = None) -> Any:
        """
        Perform a GET request and return the decoded JSON body.

        Raises:
            TransportError: If the request fails.
            ResolutionError: If the body is not valid JSON.
        """

    def close(self) -> None:
        """Release any connections held by the transport."""


class DigestTool(ABC):
    """Computes file digests for checksum verification."""

    name: str

    @abstractmethod
    def hexdigest(self, file_path: Pathish) -> str:
        """Return the lowercase hex digest of the file at `file_path`."""


class SignatureTool(ABC):
    """Checks detached signatures against a local keyring."""

    name: str

    @abstractmethod
    def has_key(self, key_id: str) -> bool:
        """Return True when `key_id` is present in the local keyring."""

    @abstractmethod
    def verify(self, signature_path: Pathish, file_path: Pathish) -> bool:
        """Return True when `signature_path` is a good signature of `file_path`."""


class Verifier(ABC):
    """A verification step that runs against a downloaded artifact."""

    @abstractmethod
    def verify(self, artifact_url: str, local_filename: Pathish) -> VerificationResult:
        """
        Verify the local copy of `artifact_url`.

        Returns:
            VerificationResult: PASSED, SKIPPED or FAILED.

        Raises:
            TransportError: If a side-file cannot be fetched.
        """
