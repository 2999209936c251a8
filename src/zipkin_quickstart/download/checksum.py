"""
Checksum Verification

Fetches the detached `.md5` file published next to an artifact and compares
it with the digest of the downloaded copy.
"""

from pathlib import Path
from typing import Optional

from zipkin_quickstart.constants import CHECKSUM_SUFFIX
from zipkin_quickstart.log_utils import logger

from .interfaces import (
    DigestTool,
    Pathish,
    Transport,
    VerificationResult,
    VerificationStatus,
    Verifier,
)


def read_expected_digest(checksum_path: Pathish) -> str:
    """
    Return the digest recorded in a checksum file.

    Accepts both a bare digest and the `<digest>  <filename>` layout written by
    md5sum; surrounding whitespace and letter case are ignored.
    """
    content = Path(checksum_path).read_text(encoding="ascii", errors="replace")
    tokens = content.split()
    return tokens[0].lower() if tokens else ""


class ChecksumVerifier(Verifier):
    """Verifies an artifact against its published checksum."""

    def __init__(self, transport: Transport, digest_tool: Optional[DigestTool]):
        self.transport = transport
        self.digest_tool = digest_tool

    def verify(self, artifact_url: str, local_filename: Pathish) -> VerificationResult:
        """
        Fetch `<artifact_url>.md5` and check the local file against it.

        The checksum file is fetched even when no digest tool is available so
        it can still have its signature verified and be checked by hand.

        Returns:
            VerificationResult: PASSED on a match, FAILED on a mismatch,
            SKIPPED when no digest tool is available.

        Raises:
            TransportError: If the checksum file cannot be fetched.
        """
        local_path = str(local_filename)
        checksum_path = f"{local_path}{CHECKSUM_SUFFIX}"
        self.transport.fetch(f"{artifact_url}{CHECKSUM_SUFFIX}", checksum_path)

        if self.digest_tool is None:
            message = "md5 digests not available, skipping checksum verification"
            logger.warning(message)
            return VerificationResult(
                VerificationStatus.SKIPPED,
                path=local_path,
                message=message,
                side_files=[checksum_path],
            )

        logger.info("[bold]Verifying checksum...[/bold]")
        try:
            expected = read_expected_digest(checksum_path)
            actual = self.digest_tool.hexdigest(local_path).lower()
        except OSError as e:
            message = f"Could not read files for checksum verification: {e}"
            return VerificationResult(
                VerificationStatus.FAILED,
                path=local_path,
                message=message,
                side_files=[checksum_path],
            )

        if not expected or actual != expected:
            message = (
                f"Checksum mismatch for {local_path}: "
                f"expected {expected or '<empty>'}, got {actual}"
            )
            return VerificationResult(
                VerificationStatus.FAILED,
                path=local_path,
                message=message,
                side_files=[checksum_path],
            )

        logger.info(f"[green]Checksum for {local_path} passes verification[/green]")
        return VerificationResult(
            VerificationStatus.PASSED, path=local_path, side_files=[checksum_path]
        )
