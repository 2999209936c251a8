"""
Installer Download Subsystem

Core Components:
- interfaces: data model and tool/transport interfaces
- transport: HTTP fetching
- version: latest-version resolution and version validation
- locator: artifact URL and filename construction
- checksum: detached checksum verification
- signature: detached signature verification
- tools: detection of optional local tools
- pipeline: orchestration and side-file cleanup
"""

from .checksum import ChecksumVerifier
from .interfaces import (
    ArtifactCoordinate,
    DigestTool,
    PipelineOutcome,
    ResolvedArtifact,
    SignatureTool,
    Transport,
    VerificationResult,
    VerificationStatus,
    Verifier,
)
from .locator import locate, parse_coordinate
from .pipeline import CleanupScope, Pipeline
from .signature import SignatureVerifier
from .tools import Capabilities, detect_capabilities
from .transport import RequestsTransport
from .version import VersionResolver, validate_version

__all__ = [
    # Interfaces
    "ArtifactCoordinate",
    "ResolvedArtifact",
    "VerificationStatus",
    "VerificationResult",
    "PipelineOutcome",
    "Transport",
    "DigestTool",
    "SignatureTool",
    "Verifier",
    # Components
    "RequestsTransport",
    "VersionResolver",
    "validate_version",
    "locate",
    "parse_coordinate",
    "ChecksumVerifier",
    "SignatureVerifier",
    "Capabilities",
    "detect_capabilities",
    # Orchestration
    "Pipeline",
    "CleanupScope",
]
