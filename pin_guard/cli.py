"""
CLI entry point: ties together config → discovery → walker → reporter.

Usage:
  # Scan the current checkout (.github/workflows and .github/actions):
  python3 -m pin_guard scan

  # Scan another checkout, exempting a prefix, without failing:
  python3 -m pin_guard scan path/to/repo --allowlist actions/ --dry-run

  # Machine-readable output:
  python3 -m pin_guard scan --format sarif > results.sarif

Inside a GitHub Action the INPUT_ALLOWLIST and INPUT_DRY_RUN inputs are read
from the environment and output defaults to workflow commands.

Exit codes:
  0 — no unpinned references (or dry-run)
  1 — unpinned references found
  2 — error (bad input, unreadable or invalid YAML, etc.)
"""

import logging
import os
import sys

import click
import yaml

from pin_guard import __version__
from pin_guard.config import load_config, parse_allowlist
from pin_guard.reporter import REPORTER_NAMES, get_reporter
from pin_guard.scanner import EXIT_ERROR, EXIT_FINDINGS, EXIT_OK, scan_repository

logger = logging.getLogger(__name__)

__all__ = ["cli", "EXIT_OK", "EXIT_FINDINGS", "EXIT_ERROR"]


def _setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity flag."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


@click.group()
@click.version_option(__version__, prog_name="pin-guard")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging.")
def cli(verbose: bool):
    """Check that GitHub Actions references are pinned to full commit SHAs."""
    _setup_logging(verbose)


@cli.command()
@click.argument("root", default=".", type=click.Path(file_okay=False))
@click.option("--allowlist", "allowlist", multiple=True, help="Action name prefix exempt from pinning. Repeatable.")
@click.option("--dry-run", is_flag=True, help="Report unpinned references as warnings and exit 0.")
@click.option("--format", "output_format", type=click.Choice(REPORTER_NAMES), default="auto", help="Output format.")
@click.option("--workflows-path", default=None, help="Workflows directory, relative to ROOT.")
@click.option("--actions-path", default=None, help="Composite actions directory, relative to ROOT.")
@click.option("--action-files-only", is_flag=True, help="Only scan action.yml/action.yaml under the actions directory.")
@click.option("--config", "config_path", default=None, help="Path to .pin-guard.yml config file.")
def scan(root, allowlist, dry_run, output_format, workflows_path, actions_path, action_files_only, config_path):
    """Scan workflow and composite action files under ROOT.

    Exits with code 0 if everything is pinned, 1 if not, 2 on error.
    """
    if not os.path.isdir(root):
        click.echo(f"Error: '{root}' is not a directory.", err=True)
        sys.exit(EXIT_ERROR)

    try:
        config = load_config(config_path=config_path, scan_path=os.path.abspath(root))
    except (OSError, yaml.YAMLError) as e:
        click.echo(f"Error loading config: {e}", err=True)
        sys.exit(EXIT_ERROR)

    # CLI flags override config file and action inputs
    if allowlist:
        config.allowlist = parse_allowlist(list(allowlist))
    if dry_run:
        config.dry_run = True
    if workflows_path is not None:
        config.workflows_path = workflows_path
    if actions_path is not None:
        config.actions_path = actions_path
    if action_files_only:
        config.action_files_only = True

    logger.debug("Effective config: %s", config)

    reporter = get_reporter(output_format)
    exit_code = scan_repository(config, reporter, root=root)

    output = reporter.close()
    if output is not None:
        click.echo(output)

    sys.exit(exit_code)


if __name__ == "__main__":
    cli()
