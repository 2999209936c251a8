"""
Install Pipeline

Runs resolve -> validate -> locate -> fetch -> verify for a single artifact
and decides what happens to the verification side-files afterwards.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.markup import escape

from zipkin_quickstart.constants import (
    CHECKSUM_SUFFIX,
    KEYSERVER,
    REGISTRY_DOWNLOAD_BASE,
    REGISTRY_SEARCH_URL,
    REGISTRY_SUBJECT,
    SIDE_FILE_SUFFIXES,
    SIGNING_KEY_ID,
)
from zipkin_quickstart.exceptions import QuickstartError, VerificationError
from zipkin_quickstart.log_utils import logger

from .checksum import ChecksumVerifier
from .interfaces import (
    ArtifactCoordinate,
    Pathish,
    PipelineOutcome,
    ResolvedArtifact,
    Transport,
    VerificationResult,
    VerificationStatus,
    Verifier,
)
from .locator import locate
from .signature import SignatureVerifier
from .tools import Capabilities, detect_capabilities
from .transport import RequestsTransport
from .version import VersionResolver, validate_version


def side_file_paths(local_filename: Pathish) -> List[str]:
    """Return the `.md5`, `.asc` and `.md5.asc` paths belonging to `local_filename`."""
    return [f"{local_filename}{suffix}" for suffix in SIDE_FILE_SUFFIXES]


class CleanupScope:
    """
    Context manager owning the side-files of one run.

    On a clean exit of a successful run without a manual verification
    request, every side-file of the target is deleted. Otherwise (an exception, including
    KeyboardInterrupt, a failed run, or a manual verification request) all
    files are kept and only the side-files this run wrote, registered through
    `track`, are recorded on the outcome. Exceptions are never suppressed.
    """

    def __init__(self, local_filename: Pathish, outcome: PipelineOutcome):
        self.local_filename = str(local_filename)
        self.outcome = outcome
        self.written: List[str] = []

    def __enter__(self) -> "CleanupScope":
        return self

    def track(self, paths: List[str]) -> None:
        """Register side-files written during this run."""
        for path in paths:
            if path not in self.written:
                self.written.append(path)

    def __exit__(self, exc_type, exc, tb) -> bool:
        if (
            exc_type is None
            and self.outcome.success
            and not self.outcome.manual_verification_requested
        ):
            self._remove_side_files()
        else:
            self._preserve_side_files()
        return False

    def _remove_side_files(self) -> None:
        for path in side_file_paths(self.local_filename):
            if not os.path.exists(path):
                continue
            try:
                os.remove(path)
                logger.debug(f"Removed verification file {path}")
            except OSError as e:
                logger.warning(f"Could not remove verification file {path}: {e}")
                self.outcome.side_files.append(path)

    def _preserve_side_files(self) -> None:
        kept = [p for p in self.written if os.path.exists(p)]
        self.outcome.side_files.extend(kept)
        if kept:
            self.outcome.diagnostics.append(
                "Verification files kept for inspection: " + ", ".join(kept)
            )


class Pipeline:
    """
    Downloads and verifies one artifact.

    Each step aborts the run on error; SKIPPED verification results are not
    errors. A checksum mismatch stops the run before any signature is
    checked.
    """

    def __init__(
        self,
        transport: Transport,
        resolver: VersionResolver,
        checksum_verifier: Verifier,
        signature_verifier: Verifier,
        download_base: str = REGISTRY_DOWNLOAD_BASE,
    ):
        self.transport = transport
        self.resolver = resolver
        self.checksum_verifier = checksum_verifier
        self.signature_verifier = signature_verifier
        self.download_base = download_base

    @classmethod
    def from_config(
        cls,
        config: Dict[str, Any],
        transport: Optional[Transport] = None,
        capabilities: Optional[Capabilities] = None,
    ) -> "Pipeline":
        """
        Wire a pipeline from loaded configuration.

        Optional tools are probed here, once, unless `capabilities` is given.
        """
        if transport is None:
            transport = RequestsTransport(timeout=config["REQUEST_TIMEOUT"])
        if capabilities is None:
            capabilities = detect_capabilities(config)

        return cls(
            transport=transport,
            resolver=VersionResolver(
                transport,
                search_url=config.get("REGISTRY_SEARCH_URL", REGISTRY_SEARCH_URL),
                subject=config.get("REGISTRY_SUBJECT", REGISTRY_SUBJECT),
            ),
            checksum_verifier=ChecksumVerifier(transport, capabilities.digest_tool),
            signature_verifier=SignatureVerifier(
                transport,
                capabilities.signature_tool,
                key_id=config.get("SIGNING_KEY_ID", SIGNING_KEY_ID),
                keyserver=config.get("KEYSERVER", KEYSERVER),
            ),
            download_base=config.get("REGISTRY_DOWNLOAD_BASE", REGISTRY_DOWNLOAD_BASE),
        )

    def run(self, coordinate: ArtifactCoordinate, target: Pathish) -> PipelineOutcome:
        """
        Install `coordinate` to `target`.

        Returns:
            PipelineOutcome: success flag, diagnostics, and the side-files left
            on disk. Installer errors and KeyboardInterrupt are captured on the
            outcome rather than raised, and both keep every file in place.
        """
        outcome = PipelineOutcome(success=False, primary_file_path=str(target))
        try:
            with CleanupScope(target, outcome) as scope:
                self._run_steps(coordinate, str(target), outcome, scope)
                outcome.success = True
        except QuickstartError as e:
            outcome.success = False
            outcome.error = e
            outcome.diagnostics.append(str(e))
            logger.error(f"[red]{escape(str(e))}[/red]")
        except KeyboardInterrupt:
            outcome.success = False
            outcome.error = QuickstartError("Interrupted")
            outcome.diagnostics.append("Interrupted")
            logger.error("[red]Interrupted[/red]")
        return outcome

    def _run_steps(
        self,
        coordinate: ArtifactCoordinate,
        target: str,
        outcome: PipelineOutcome,
        scope: CleanupScope,
    ) -> None:
        resolved = False
        if coordinate.is_latest:
            logger.info(
                f"[bold]Fetching version number of latest "
                f"{coordinate.group}:{coordinate.artifact_id} release...[/bold]"
            )
            version = self.resolver.resolve_latest(
                coordinate.group, coordinate.artifact_id
            )
            coordinate = coordinate.with_version(version)
            resolved = True

        validate_version(coordinate.version, resolved=resolved)
        if resolved:
            outcome.diagnostics.append(
                f"Latest release of {coordinate.group}:{coordinate.artifact_id} "
                f"is {coordinate.version}"
            )
            logger.info(
                f"[green]Latest release of {coordinate.group}:{coordinate.artifact_id} "
                f"seems to be {coordinate.version}[/green]"
            )

        artifact = locate(coordinate, self.download_base, target=target)
        outcome.artifact = artifact
        self._fetch(artifact, outcome)

        self._check(
            self.checksum_verifier.verify(artifact.url, artifact.local_filename),
            outcome,
            scope,
        )
        self._check(
            self.signature_verifier.verify(artifact.url, artifact.local_filename),
            outcome,
            scope,
        )
        self._check(
            self.signature_verifier.verify(
                f"{artifact.url}{CHECKSUM_SUFFIX}",
                f"{artifact.local_filename}{CHECKSUM_SUFFIX}",
            ),
            outcome,
            scope,
        )

    def _fetch(self, artifact: ResolvedArtifact, outcome: PipelineOutcome) -> Path:
        logger.info(
            f"[bold]Downloading {artifact.coordinate} to {artifact.local_filename}...[/bold]"
        )
        path = self.transport.fetch(artifact.url, artifact.local_filename)
        outcome.diagnostics.append(f"Downloaded {artifact.url} to {path}")
        return path

    @staticmethod
    def _check(
        result: VerificationResult, outcome: PipelineOutcome, scope: CleanupScope
    ) -> None:
        scope.track(result.side_files)
        if result.manual_verification_requested:
            outcome.manual_verification_requested = True

        summary = f"{result.path}: {result.status.value}"
        if result.message and result.status is not VerificationStatus.PASSED:
            summary = f"{summary} ({result.message})"
        outcome.diagnostics.append(summary)

        if result.failed:
            raise VerificationError(
                result.message or f"Verification failed for {result.path}",
                path=result.path,
            )
