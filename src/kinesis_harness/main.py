"""Command line entry point running the live Kinesis scenarios."""

import logging
import sys
from typing import Optional

import click
from botocore.exceptions import BotoCoreError

from .clients.errors import KinesisError
from .clients.kinesis_client import KinesisClient
from .config.aws_config import AWSClientManager
from .config.settings import load_settings
from .scenarios import ScenarioReport, run_all
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)

COST_WARNING = """
NOTE

This harness accesses the AWS account that is associated with the default
credentials (or the credentials configured in the settings file).

By running the scenarios in this harness costs for usage of AWS
services may incur.

In order to actually execute the scenarios you must provide the command
line option:

    --run-with-aws-credentials
"""


def print_report(report: ScenarioReport) -> None:
    for result in report.results:
        if result.passed:
            click.echo(f"PASS {result.name}")
        else:
            click.echo(f"FAIL {result.name}: {result.outcome.reason}")

    total = len(report.results)
    click.echo(f"{total - len(report.failures)}/{total} scenarios passed")


@click.command()
@click.option(
    "--run-with-aws-credentials",
    "consent",
    is_flag=True,
    help="Confirm that running the scenarios against AWS may incur costs.",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="YAML settings file.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(consent: bool, config_file: Optional[str], verbose: bool) -> None:
    """Run the Kinesis client scenarios against a live endpoint."""
    if not consent:
        click.echo(COST_WARNING)
        sys.exit(1)

    try:
        settings = load_settings(config_file)
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e

    logging_config = settings.logging
    if verbose:
        logging_config = logging_config.model_copy(update={'level': 'DEBUG'})
    setup_logging(logging_config)

    try:
        client = KinesisClient.from_manager(AWSClientManager(settings.aws))
        report = run_all(client, settings)
    except (BotoCoreError, KinesisError, ValueError) as e:
        logger.error(f"Scenario run aborted: {e}", exc_info=verbose)
        raise click.ClickException(f"Scenario run aborted: {e}") from e

    print_report(report)

    sys.exit(0 if report.passed else 1)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
