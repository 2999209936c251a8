"""
End-to-end tests for the installer command line.

The pipeline is wired with the in-memory transport and fake tools, so these
tests run everything from argument parsing to farewell without the network.
"""

import pytest

from tests.fakes import ARTIFACT_URL, FakeSignatureTool, FakeTransport, repository_files
from zipkin_quickstart import cli
from zipkin_quickstart.download.tools import Capabilities, HashlibDigestTool
from zipkin_quickstart.exceptions import UsageError

pytestmark = [pytest.mark.integration]


@pytest.fixture
def wire(mocker):
    """Make Pipeline.from_config use the given transport and signature tool."""

    def _wire(transport, signature_tool=None):
        mocker.patch(
            "zipkin_quickstart.download.pipeline.RequestsTransport",
            return_value=transport,
        )
        mocker.patch(
            "zipkin_quickstart.download.pipeline.detect_capabilities",
            return_value=Capabilities(
                digest_tool=HashlibDigestTool("md5"), signature_tool=signature_tool
            ),
        )
        return transport

    return _wire


def _exit_code(argv):
    with pytest.raises(SystemExit) as exc_info:
        cli.main(argv)
    return exc_info.value.code


class TestUsage:
    def test_help_exits_zero(self, capsys):
        assert _exit_code(["--help"]) == 0
        assert "GROUP:ARTIFACT:VERSION:CLASSIFIER" in capsys.readouterr().out

    def test_short_help_exits_zero(self, capsys):
        assert _exit_code(["-h"]) == 0

    @pytest.mark.parametrize("argv", [["one"], ["a", "b", "c"]])
    def test_wrong_argument_count_prints_usage_to_stderr(self, argv, capsys, mocker):
        from_config = mocker.patch("zipkin_quickstart.cli.Pipeline.from_config")

        assert _exit_code(argv) == 1

        captured = capsys.readouterr()
        assert "usage:" in captured.err
        assert captured.out == ""
        from_config.assert_not_called()

    def test_unknown_option_is_usage_error(self, capsys):
        assert _exit_code(["--bogus"]) == 1
        assert "usage:" in capsys.readouterr().err

    def test_parse_invocation_defaults(self):
        coordinate, target = cli.parse_invocation(None, None)

        assert str(coordinate) == "io.zipkin.java:zipkin-server:LATEST:exec"
        assert target == "zipkin.jar"

    def test_parse_invocation_requires_target(self):
        with pytest.raises(UsageError):
            cli.parse_invocation("io.zipkin.java:zipkin-server:2.4.5:exec", None)


class TestInstall:
    def test_exact_coordinate_succeeds_and_cleans_up(self, workdir, wire, capsys):
        transport = wire(FakeTransport(files=repository_files()), FakeSignatureTool())

        code = _exit_code(["io.zipkin.java:zipkin-server:2.4.5:exec", "out.jar"])

        assert code == 0
        assert (workdir / "out.jar").exists()
        assert sorted(p.name for p in workdir.iterdir()) == ["out.jar"]
        assert transport.closed
        assert "java -jar out.jar" in capsys.readouterr().out

    def test_checksum_mismatch_exits_one_and_keeps_files(self, workdir, wire, capsys):
        wire(
            FakeTransport(files=repository_files(checksum="0" * 32)),
            FakeSignatureTool(),
        )

        code = _exit_code(["io.zipkin.java:zipkin-server:2.4.5:exec", "out.jar"])

        assert code == 1
        assert (workdir / "out.jar.md5").exists()
        err = capsys.readouterr().err
        assert "quick-start setup has failed" in err
        assert "--verbose io.zipkin.java:zipkin-server:2.4.5:exec out.jar" in err
        assert "/io/zipkin/java/zipkin-server/" in err

    def test_no_arguments_installs_latest_server(self, workdir, wire):
        transport = wire(
            FakeTransport(
                files=repository_files(), packages=[{"latest_version": "2.4.5"}]
            ),
            FakeSignatureTool(),
        )

        assert _exit_code([]) == 0
        assert (workdir / "zipkin.jar").exists()
        assert transport.fetched[0] == ARTIFACT_URL
        assert transport.searches[0][1] == {
            "g": "io.zipkin.java",
            "a": "zipkin-server",
            "subject": "openzipkin",
        }

    def test_non_exec_classifier_reports_path(self, workdir, wire, capsys):
        url = (
            "https://dl.bintray.com/openzipkin/maven/io/zipkin/aws/"
            "zipkin-autoconfigure-collector-kinesis/0.11.1/"
            "zipkin-autoconfigure-collector-kinesis-0.11.1-module.jar"
        )
        wire(
            FakeTransport(
                files=repository_files(url=url),
                packages=[{"latest_version": "0.11.1"}],
            ),
            FakeSignatureTool(),
        )

        code = _exit_code(
            [
                "io.zipkin.aws:zipkin-autoconfigure-collector-kinesis:latest:module",
                "kinesis.jar",
            ]
        )

        assert code == 0
        out = capsys.readouterr().out
        assert "now available at kinesis.jar" in out
        assert "java -jar" not in out

    def test_manual_verification_keeps_side_files(self, workdir, wire, capsys):
        wire(
            FakeTransport(files=repository_files()),
            FakeSignatureTool(key_known=False),
        )

        code = _exit_code(["io.zipkin.java:zipkin-server:2.4.5:exec", "out.jar"])

        assert code == 0
        assert sorted(p.name for p in workdir.iterdir()) == [
            "out.jar",
            "out.jar.asc",
            "out.jar.md5",
            "out.jar.md5.asc",
        ]
        assert "gpg --verify out.jar.asc out.jar" in capsys.readouterr().err

    def test_resolution_failure_exits_one(self, workdir, wire):
        transport = wire(FakeTransport(packages=[]), FakeSignatureTool())

        assert _exit_code(["io.zipkin.java:nope:LATEST:exec", "out.jar"]) == 1
        assert transport.fetched == []

    def test_invalid_config_exits_one(self, workdir, monkeypatch, mocker):
        monkeypatch.setenv("ZIPKIN_QUICKSTART_REQUEST_TIMEOUT", "soon")
        from_config = mocker.patch("zipkin_quickstart.cli.Pipeline.from_config")

        assert _exit_code([]) == 1
        from_config.assert_not_called()

    @pytest.mark.parametrize(
        "target",
        [
            "zipkin_quickstart.config.load_config",
            "zipkin_quickstart.cli.Pipeline.from_config",
        ],
    )
    def test_interrupt_before_run_exits_one(self, target, workdir, mocker, capsys):
        """Ctrl-C while setting up gets the remediation block, not a traceback."""
        mocker.patch(target, side_effect=KeyboardInterrupt)

        assert _exit_code([]) == 1
        assert "quick-start setup has failed" in capsys.readouterr().err

    def test_verbose_sets_debug_level(self, workdir, wire, mocker):
        wire(FakeTransport(files=repository_files()), FakeSignatureTool())
        set_level = mocker.patch.object(cli.log_utils, "set_log_level")

        _exit_code(["-v", "io.zipkin.java:zipkin-server:2.4.5:exec", "out.jar"])

        set_level.assert_called_once_with("DEBUG")
