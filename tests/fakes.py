"""Test doubles shared by the installer tests."""

import hashlib
from pathlib import Path

from zipkin_quickstart.download.interfaces import SignatureTool, Transport
from zipkin_quickstart.exceptions import TransportError

ARTIFACT_URL = (
    "https://dl.bintray.com/openzipkin/maven/io/zipkin/java/zipkin-server/"
    "2.4.5/zipkin-server-2.4.5-exec.jar"
)
ARTIFACT_BYTES = b"PK\x03\x04 not really a jar"


class FakeTransport(Transport):
    """
    In-memory transport serving canned bodies by URL.

    URLs missing from `files` fail like an HTTP 404.
    """

    def __init__(self, files=None, packages=None):
        self.files = dict(files or {})
        self.packages = packages
        self.fetched = []
        self.searches = []
        self.closed = False

    def fetch(self, url, destination):
        self.fetched.append(url)
        if url not in self.files:
            raise TransportError(f"HTTP 404 fetching {url}", url=url, status_code=404)
        path = Path(destination)
        path.write_bytes(self.files[url])
        return path

    def get_json(self, url, params=None):
        self.searches.append((url, params))
        return self.packages

    def close(self):
        self.closed = True


class FakeSignatureTool(SignatureTool):
    """Signature tool with a scripted keyring and verdict."""

    name = "fake-gpg"

    def __init__(self, key_known=True, signature_valid=True):
        self.key_known = key_known
        self.signature_valid = signature_valid
        self.verified = []

    def has_key(self, key_id):
        return self.key_known

    def verify(self, signature_path, file_path):
        self.verified.append((str(signature_path), str(file_path)))
        return self.signature_valid


def repository_files(url=ARTIFACT_URL, content=ARTIFACT_BYTES, checksum=None):
    """
    Build the URL -> bytes mapping a Maven repository would serve for one artifact.

    Parameters:
        checksum (str | None): Override the published md5; defaults to the real digest of `content`.
    """
    md5 = checksum if checksum is not None else hashlib.md5(content).hexdigest()
    return {
        url: content,
        f"{url}.md5": md5.encode("ascii"),
        f"{url}.asc": b"-----BEGIN PGP SIGNATURE-----",
        f"{url}.md5.asc": b"-----BEGIN PGP SIGNATURE-----",
    }

