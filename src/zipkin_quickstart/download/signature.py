"""
Signature Verification

Fetches the detached `.asc` signature published next to an artifact and
checks it with the local signature tool, provided the publisher key is
already in the user's keyring. Importing the key is left to the user.
"""

from typing import Optional

from zipkin_quickstart.constants import (
    KEYSERVER,
    SIGNATURE_SUFFIX,
    SIGNING_KEY_ID,
    SIGNING_KEY_OWNER,
)
from zipkin_quickstart.log_utils import logger

from .interfaces import (
    Pathish,
    SignatureTool,
    Transport,
    VerificationResult,
    VerificationStatus,
    Verifier,
)


def manual_verification_instructions(
    local_filename: str, key_id: str = SIGNING_KEY_ID, keyserver: str = KEYSERVER
) -> str:
    """Return the commands a user needs to import the key and verify by hand."""
    return (
        f"{SIGNING_KEY_OWNER} GPG signing key is not known, skipping signature verification.\n"
        f"You can import it, then verify the signature of {local_filename}, using the following\n"
        "commands:\n"
        "\n"
        f"    gpg --keyserver {keyserver} --recv {key_id}\n"
        f"    # Optionally trust the key via 'gpg --edit-key {key_id}', then typing 'trust',\n"
        "    # choosing a trust level, and exiting the interactive GPG session by 'quit'\n"
        f"    gpg --verify {local_filename}{SIGNATURE_SUFFIX} {local_filename}"
    )


class SignatureVerifier(Verifier):
    """
    Verifies the detached signature of a downloaded file.

    States:
    - no signature tool: SKIPPED, nothing fetched;
    - tool but publisher key unknown: signature fetched, instructions logged,
      SKIPPED with manual verification requested;
    - tool and key known: PASSED or FAILED depending on the signature.
    """

    def __init__(
        self,
        transport: Transport,
        signature_tool: Optional[SignatureTool],
        key_id: str = SIGNING_KEY_ID,
        keyserver: str = KEYSERVER,
    ):
        self.transport = transport
        self.signature_tool = signature_tool
        self.key_id = key_id
        self.keyserver = keyserver

    def verify(self, artifact_url: str, local_filename: Pathish) -> VerificationResult:
        local_path = str(local_filename)

        if self.signature_tool is None:
            message = "gpg not found on path, skipping signature verification"
            logger.warning(message)
            return VerificationResult(
                VerificationStatus.SKIPPED, path=local_path, message=message
            )

        logger.info(f"[bold]Verifying GPG signature of {local_path}...[/bold]")
        signature_path = f"{local_path}{SIGNATURE_SUFFIX}"
        self.transport.fetch(f"{artifact_url}{SIGNATURE_SUFFIX}", signature_path)

        if not self.signature_tool.has_key(self.key_id):
            message = manual_verification_instructions(
                local_path, key_id=self.key_id, keyserver=self.keyserver
            )
            logger.warning(message)
            return VerificationResult(
                VerificationStatus.SKIPPED,
                path=local_path,
                message=f"Signing key {self.key_id} not in keyring",
                manual_verification_requested=True,
                side_files=[signature_path],
            )

        if not self.signature_tool.verify(signature_path, local_path):
            message = f"GPG signature for {local_path} failed verification"
            return VerificationResult(
                VerificationStatus.FAILED,
                path=local_path,
                message=message,
                side_files=[signature_path],
            )

        logger.info(
            f"[green]GPG signature for {local_path} passes verification[/green]"
        )
        return VerificationResult(
            VerificationStatus.PASSED, path=local_path, side_files=[signature_path]
        )
