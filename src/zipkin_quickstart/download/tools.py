"""
Optional Local Tools

Probes the machine once for the tools checksum and signature verification
depend on, and wraps each behind the DigestTool / SignatureTool interfaces.
A missing tool is represented by None and turns the matching verification
step into a skip.
"""

import hashlib
import shutil
import subprocess
from dataclasses import dataclass
from typing import Any, Dict, Optional

from zipkin_quickstart.constants import (
    CHECKSUM_ALGORITHM,
    DEFAULT_REQUEST_TIMEOUT,
    GPG_BINARY,
)
from zipkin_quickstart.exceptions import ToolUnavailableError
from zipkin_quickstart.log_utils import logger

from .interfaces import DigestTool, Pathish, SignatureTool


class HashlibDigestTool(DigestTool):
    """Digest tool backed by hashlib."""

    def __init__(self, algorithm: str = CHECKSUM_ALGORITHM):
        try:
            hashlib.new(algorithm)
        except ValueError as e:
            # Unknown algorithm, or blocked by a FIPS-restricted OpenSSL
            raise ToolUnavailableError(
                f"{algorithm} digests are not available", tool=algorithm, details=str(e)
            ) from e
        self.algorithm = algorithm
        self.name = algorithm

    def hexdigest(self, file_path: Pathish) -> str:
        digest = hashlib.new(self.algorithm)
        with open(file_path, "rb") as f:
            for chunk in iter(lambda: f.read(4096), b""):
                digest.update(chunk)
        return digest.hexdigest()


class GpgSignatureTool(SignatureTool):
    """Signature tool that shells out to a gpg binary."""

    name = "gpg"

    def __init__(self, executable: str, timeout: float = DEFAULT_REQUEST_TIMEOUT):
        self.executable = executable
        self.timeout = timeout

    def _run(self, *args: str) -> subprocess.CompletedProcess:
        command = [self.executable, *args]
        logger.debug(f"[dim]> {' '.join(command)}[/dim]")
        return subprocess.run(
            command,
            capture_output=True,
            text=True,
            check=False,
            timeout=self.timeout,
        )

    def has_key(self, key_id: str) -> bool:
        try:
            result = self._run("--list-keys", key_id)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug(f"gpg --list-keys {key_id} failed: {e}")
            return False
        return result.returncode == 0

    def verify(self, signature_path: Pathish, file_path: Pathish) -> bool:
        try:
            result = self._run("--verify", str(signature_path), str(file_path))
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.error(f"Could not run gpg --verify on {signature_path}: {e}")
            return False
        output = (result.stderr or result.stdout or "").strip()
        if output:
            logger.debug(output)
        return result.returncode == 0


@dataclass
class Capabilities:
    """Optional tools detected on this machine."""

    digest_tool: Optional[DigestTool] = None
    signature_tool: Optional[SignatureTool] = None


def detect_digest_tool(algorithm: str = CHECKSUM_ALGORITHM) -> Optional[DigestTool]:
    try:
        return HashlibDigestTool(algorithm)
    except ToolUnavailableError as e:
        logger.debug(f"Digest tool unavailable: {e}")
        return None


def detect_signature_tool(
    executable: str = GPG_BINARY, timeout: float = DEFAULT_REQUEST_TIMEOUT
) -> Optional[SignatureTool]:
    path = shutil.which(executable)
    if path is None:
        logger.debug(f"{executable} not found on PATH")
        return None
    return GpgSignatureTool(path, timeout=timeout)


def detect_capabilities(config: Dict[str, Any]) -> Capabilities:
    """
    Probe for every optional tool the pipeline can use.

    Parameters:
        config (Dict[str, Any]): Loaded configuration; `GPG_BINARY` and
            `REQUEST_TIMEOUT` are used.
    """
    return Capabilities(
        digest_tool=detect_digest_tool(),
        signature_tool=detect_signature_tool(
            config.get("GPG_BINARY", GPG_BINARY),
            timeout=config.get("REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
        ),
    )
