"""
Tests for ChecksumVerifier.

Covers:
- Matching and mismatching digests
- md5sum-style checksum files and case/whitespace differences
- Missing digest tool (skip, but the checksum file is still fetched)
- Transport failures while fetching the checksum file
"""

import hashlib

import pytest

from tests.fakes import ARTIFACT_BYTES, ARTIFACT_URL, FakeTransport, repository_files
from zipkin_quickstart.download.checksum import ChecksumVerifier, read_expected_digest
from zipkin_quickstart.download.interfaces import VerificationStatus
from zipkin_quickstart.download.tools import HashlibDigestTool
from zipkin_quickstart.exceptions import TransportError

pytestmark = [pytest.mark.unit]

DIGEST = hashlib.md5(ARTIFACT_BYTES).hexdigest()


@pytest.fixture
def local_jar(tmp_path):
    path = tmp_path / "out.jar"
    path.write_bytes(ARTIFACT_BYTES)
    return path


class TestChecksumVerifier:
    """Test checksum verification results."""

    def test_matching_digest_passes(self, local_jar):
        transport = FakeTransport(files=repository_files())
        verifier = ChecksumVerifier(transport, HashlibDigestTool("md5"))

        result = verifier.verify(ARTIFACT_URL, local_jar)

        assert result.status is VerificationStatus.PASSED
        assert result.path == str(local_jar)
        assert transport.fetched == [f"{ARTIFACT_URL}.md5"]
        assert result.side_files == [f"{local_jar}.md5"]
        assert (local_jar.parent / "out.jar.md5").read_text() == DIGEST

    def test_mismatched_digest_fails(self, local_jar):
        transport = FakeTransport(files=repository_files(checksum="0" * 32))
        verifier = ChecksumVerifier(transport, HashlibDigestTool("md5"))

        result = verifier.verify(ARTIFACT_URL, local_jar)

        assert result.status is VerificationStatus.FAILED
        assert result.failed
        assert "mismatch" in result.message
        assert not result.manual_verification_requested

    @pytest.mark.parametrize(
        "published",
        [
            f"{DIGEST}\n",
            f"  {DIGEST.upper()}  ",
            f"{DIGEST}  zipkin-server-2.4.5-exec.jar\n",
        ],
    )
    def test_whitespace_and_case_are_ignored(self, local_jar, published):
        transport = FakeTransport(files=repository_files(checksum=published))
        verifier = ChecksumVerifier(transport, HashlibDigestTool("md5"))

        assert verifier.verify(ARTIFACT_URL, local_jar).status is VerificationStatus.PASSED

    def test_empty_checksum_file_fails(self, local_jar):
        transport = FakeTransport(files=repository_files(checksum=""))
        verifier = ChecksumVerifier(transport, HashlibDigestTool("md5"))

        assert verifier.verify(ARTIFACT_URL, local_jar).failed

    def test_without_digest_tool_skips_but_fetches(self, local_jar):
        """The .md5 file is still downloaded for signature checks and manual use."""
        transport = FakeTransport(files=repository_files(checksum="0" * 32))
        verifier = ChecksumVerifier(transport, None)

        result = verifier.verify(ARTIFACT_URL, local_jar)

        assert result.status is VerificationStatus.SKIPPED
        assert transport.fetched == [f"{ARTIFACT_URL}.md5"]
        assert (local_jar.parent / "out.jar.md5").exists()

    def test_missing_checksum_file_raises_transport_error(self, local_jar):
        transport = FakeTransport(files={ARTIFACT_URL: ARTIFACT_BYTES})
        verifier = ChecksumVerifier(transport, HashlibDigestTool("md5"))

        with pytest.raises(TransportError) as exc_info:
            verifier.verify(ARTIFACT_URL, local_jar)

        assert exc_info.value.status_code == 404

    def test_unreadable_artifact_fails(self, tmp_path):
        transport = FakeTransport(files=repository_files())
        verifier = ChecksumVerifier(transport, HashlibDigestTool("md5"))
        missing = tmp_path / "gone" / "out.jar"
        missing.parent.mkdir()

        assert verifier.verify(ARTIFACT_URL, missing).failed


class TestReadExpectedDigest:
    def test_first_token_lowercased(self, tmp_path):
        path = tmp_path / "x.md5"
        path.write_text("ABCDEF  x.jar\n")

        assert read_expected_digest(path) == "abcdef"

    def test_blank_file(self, tmp_path):
        path = tmp_path / "x.md5"
        path.write_text("  \n")

        assert read_expected_digest(path) == ""
