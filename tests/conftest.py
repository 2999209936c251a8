import platformdirs
import pytest
import requests

from tests.fakes import FakeSignatureTool, FakeTransport, repository_files
from zipkin_quickstart.download.tools import Capabilities, HashlibDigestTool

_NETWORK_BLOCK_MSG = (
    "Network access is blocked during tests. Mock requests.* or Session.request."
)


def _block_network(*_args, **_kwargs):
    """
    Prevent network calls in tests by raising a RuntimeError.

    Raises:
        RuntimeError: with `_NETWORK_BLOCK_MSG` indicating that network access is blocked during tests.
    """
    raise RuntimeError(_NETWORK_BLOCK_MSG)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast isolated tests")
    config.addinivalue_line(
        "markers", "integration: tests running the whole pipeline or CLI"
    )


@pytest.fixture(autouse=True)
def _isolate_test_environment(tmp_path_factory, monkeypatch):
    """
    Point platformdirs and the XDG variables at temp directories and clear installer env vars.

    Keeps a developer's own quickstart.yaml or ZIPKIN_QUICKSTART_* settings from leaking into tests.
    """
    base = tmp_path_factory.mktemp("zipkin_quickstart")
    config_dir = base / "config"
    config_dir.mkdir(parents=True, exist_ok=True)

    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_dir))
    monkeypatch.setattr(
        platformdirs, "user_config_dir", lambda *_args, **_kwargs: str(config_dir)
    )

    for key in (
        "REGISTRY_SEARCH_URL",
        "REGISTRY_DOWNLOAD_BASE",
        "REGISTRY_SUBJECT",
        "REQUEST_TIMEOUT",
        "SIGNING_KEY_ID",
        "KEYSERVER",
        "GPG_BINARY",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(f"ZIPKIN_QUICKSTART_{key}", raising=False)


def pytest_runtest_setup():
    """Prevent real network requests during tests by replacing requests entry points."""
    requests.get = _block_network
    requests.post = _block_network
    requests.head = _block_network
    requests.Session.request = _block_network


@pytest.fixture
def fake_transport():
    """Transport serving a valid zipkin-server 2.4.5 exec jar and one matching registry package."""
    return FakeTransport(
        files=repository_files(), packages=[{"latest_version": "2.4.5"}]
    )


@pytest.fixture
def signature_tool():
    return FakeSignatureTool()


@pytest.fixture
def capabilities(signature_tool):
    return Capabilities(
        digest_tool=HashlibDigestTool("md5"), signature_tool=signature_tool
    )


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run the test from an empty temporary working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path
