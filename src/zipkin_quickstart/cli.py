# src/zipkin_quickstart/cli.py

import argparse
import sys
from typing import List, Optional, Sequence, Tuple

from rich.console import Console

from zipkin_quickstart import config as config_module
from zipkin_quickstart import log_utils
from zipkin_quickstart.constants import (
    APP_NAME,
    DEFAULT_ARTIFACT_ID,
    DEFAULT_CLASSIFIER,
    DEFAULT_GROUP,
    DEFAULT_TARGET,
    EXEC_CLASSIFIER,
    ISSUES_URL,
    LATEST_VERSION,
    REGISTRY_DOWNLOAD_BASE,
)
from zipkin_quickstart.download.interfaces import ArtifactCoordinate, PipelineOutcome
from zipkin_quickstart.download.locator import artifact_directory_url, parse_coordinate
from zipkin_quickstart.download.pipeline import Pipeline
from zipkin_quickstart.exceptions import ConfigurationError, UsageError

# Module-level consoles; tests capture or patch these.
stdout_console = Console()
stderr_console = Console(stderr=True)

DESCRIPTION = """\
Downloads the latest version of the Zipkin Server executable jar.

With GROUP:ARTIFACT:VERSION:CLASSIFIER and TARGET, downloads the "VERSION"
version of GROUP:ARTIFACT with classifier "CLASSIFIER" to path "TARGET" on the
local file system. "VERSION" can take the special value "LATEST", in which
case the latest Zipkin release will be used.
"""

EPILOG = f"""\
example:
  {APP_NAME} io.zipkin.aws:zipkin-autoconfigure-collector-kinesis:LATEST:module kinesis.jar

  downloads the latest version of the artifact with group "io.zipkin.aws",
  artifact id "zipkin-autoconfigure-collector-kinesis", and classifier "module"
  to ./kinesis.jar
"""


class _QuickstartArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting with status 2."""

    def error(self, message):
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _QuickstartArgumentParser(
        prog=APP_NAME,
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "coordinate",
        nargs="?",
        metavar="GROUP:ARTIFACT:VERSION:CLASSIFIER",
        help="Artifact to download (requires TARGET)",
    )
    parser.add_argument(
        "target",
        nargs="?",
        metavar="TARGET",
        help="Path to save the artifact to",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show every request and command as it runs",
    )
    return parser


def parse_invocation(
    coordinate_text: Optional[str], target: Optional[str]
) -> Tuple[ArtifactCoordinate, str]:
    """
    Turn the positional arguments into a coordinate and target path.

    Raises:
        UsageError: Unless both or neither positional was given.
    """
    if coordinate_text is None and target is None:
        return (
            ArtifactCoordinate(
                DEFAULT_GROUP, DEFAULT_ARTIFACT_ID, LATEST_VERSION, DEFAULT_CLASSIFIER
            ),
            DEFAULT_TARGET,
        )
    if coordinate_text is None or target is None:
        raise UsageError("Expected GROUP:ARTIFACT:VERSION:CLASSIFIER and TARGET together")
    return parse_coordinate(coordinate_text), target


def welcome() -> None:
    stdout_console.print("[bold]Thank you for trying OpenZipkin![/bold]")
    stdout_console.print(
        "This installer is provided as a quick-start helper, so you can try Zipkin out\n"
        "without a lengthy installation process.\n"
    )


def farewell(classifier: str, filename: str) -> None:
    if classifier == EXEC_CLASSIFIER:
        stdout_console.print(
            "\n[green]You can now run the downloaded executable jar:[/green]\n\n"
            f"    java -jar {filename}\n",
            highlight=False,
            soft_wrap=True,
        )
    else:
        stdout_console.print(
            f"\n[green]The downloaded artifact is now available at {filename}.[/green]",
            highlight=False,
            soft_wrap=True,
        )


def report_failure(argv: Sequence[str], download_base: str) -> None:
    """Print the remediation block shown after any fatal error."""
    passthrough = [a for a in argv if a not in ("-v", "--verbose")]
    rerun = " ".join([APP_NAME, "--verbose", *passthrough])
    stderr_console.print(
        "\n[red]It looks like quick-start setup has failed. Please run the command again\n"
        "with the verbose flag like below, and open an issue on\n"
        f"{ISSUES_URL}. Make sure to include the\n"
        "full output of the run.[/red]\n",
        highlight=False,
        soft_wrap=True,
    )
    stderr_console.print(f"    {rerun}\n", highlight=False, soft_wrap=True)
    stderr_console.print(
        "In the meanwhile, you can manually download and run the latest executable jar\n"
        "from the following URL:\n\n"
        f"{artifact_directory_url(DEFAULT_GROUP, DEFAULT_ARTIFACT_ID, download_base)}",
        highlight=False,
        soft_wrap=True,
    )


def _report_outcome(outcome: PipelineOutcome) -> None:
    for message in outcome.diagnostics:
        log_utils.logger.debug(message)
    if outcome.manual_verification_requested and outcome.side_files:
        log_utils.logger.warning(
            "Verification files were kept so you can check them by hand: "
            + ", ".join(outcome.side_files)
        )


def _install(argv: Sequence[str], coordinate: ArtifactCoordinate, target: str) -> int:
    """Load configuration, run the pipeline and render the result; returns the exit code."""
    try:
        config = config_module.load_config()
    except ConfigurationError as e:
        log_utils.logger.error(str(e), extra={"markup": False})
        report_failure(argv, REGISTRY_DOWNLOAD_BASE)
        return 1

    welcome()
    pipeline = Pipeline.from_config(config)
    try:
        outcome = pipeline.run(coordinate, target)
    finally:
        pipeline.transport.close()

    _report_outcome(outcome)
    if not outcome.success:
        report_failure(argv, config["REGISTRY_DOWNLOAD_BASE"])
        return 1

    farewell(coordinate.classifier, target)
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """
    Entry point for the installer command-line interface.

    Exits 0 when the artifact was downloaded and no verification failed, 1 on
    usage errors, configuration errors, interrupts, and any pipeline failure.
    """
    if argv is None:
        argv = sys.argv[1:]
    parser = build_parser()

    try:
        args = parser.parse_args(argv)
        coordinate, target = parse_invocation(args.coordinate, args.target)
    except UsageError as e:
        stderr_console.print(str(e), style="red", markup=False, soft_wrap=True)
        parser.print_help(sys.stderr)
        sys.exit(1)

    if args.verbose:
        log_utils.set_log_level("DEBUG")

    try:
        exit_code = _install(argv, coordinate, target)
    except KeyboardInterrupt:
        log_utils.logger.error("[red]Interrupted[/red]")
        report_failure(argv, REGISTRY_DOWNLOAD_BASE)
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
