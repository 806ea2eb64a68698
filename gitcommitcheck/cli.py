#!/usr/bin/env python3
import asyncio
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from .config import DEFAULT_CONFIG_FILENAME, Config
from .core import create_validator
from .rules import RuleConfig
from .version import display_version_info, get_version_summary

console = Console()


def print_config(config: Config, repo_path: Path) -> None:
    """Print the effective settings and where each one came from."""
    config_path = repo_path / DEFAULT_CONFIG_FILENAME
    file_values = Config.file_overrides(repo_path, console)
    env_values = Config.env_overrides()

    console.print("\n[bold]Current Configuration Settings:[/bold]")
    if config_path.exists():
        console.print(f"[dim]Config file: {config_path.as_posix()}[/dim]")
    else:
        console.print("[dim]Using default values (no config file found)[/dim]")

    console.print(f"\n{'Setting':<20} {'Value':<40} {'Source':<10}")
    console.print("-" * 70)

    for name, value in config.model_dump().items():
        if name in env_values:
            source = "env"
        elif name in file_values:
            source = "config"
        else:
            source = "default"
        console.print(f"{name:<20} {str(value):<40} {source:<10}", markup=False)

    console.print(f"{'report_file':<20} {str(config.report_path):<40} {'derived':<10}", markup=False)
    console.print(
        f"\nTo modify these settings, create or edit {DEFAULT_CONFIG_FILENAME} in your repository root"
    )


@click.command()
@click.argument("from_sha", required=False)
@click.argument("to_sha", required=False)
@click.option(
    "-p",
    "--path",
    default=".",
    help="Path to git repository (defaults to current directory)",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
)
@click.option(
    "-b",
    "--base-branch",
    help="Base branch used to find the merge-base (overrides BASE_BRANCH and config)",
)
@click.option(
    "--remote",
    help="Remote holding the base branch (overrides config setting)",
)
@click.option(
    "-o",
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for the JSON report (overrides QA_OUTPUT_DIR and config)",
)
@click.option(
    "-l",
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Optional file to log validation results (overrides config setting)",
)
@click.option("--debug", is_flag=True, help="Print debug output")
@click.option(
    "--config-list", is_flag=True, help="Display current configuration settings"
)
@click.option("--version", is_flag=True, help="Display version information and exit")
def main(
    from_sha: Optional[str],
    to_sha: Optional[str],
    path: Path,
    base_branch: Optional[str],
    remote: Optional[str],
    output_dir: Optional[Path],
    log_file: Optional[Path],
    debug: bool,
    config_list: bool,
    version: bool,
):
    """
    Validate commit messages in a range against Conventional Commits.

    FROM_SHA is the exclusive start of the range. When omitted it is the
    merge-base with the base branch, falling back to HEAD~1 and then to the
    root commit. TO_SHA is the inclusive end and defaults to HEAD.

    A JSON report is always written once validation ran; the exit code is 0
    even when commits are invalid, enforcement is up to the caller. Exit
    code 1 means the validation itself could not run.

    Configuration can be set in .gitcommitcheck.toml in the repository root.
    Environment variables and command line options override it.
    """
    try:
        if version:
            display_version_info(console)
            return

        repo_path = path.absolute()

        # Load configuration
        config = Config.load(repo_path, console=console)

        # Command line options override config
        if base_branch is not None:
            config.base_branch = base_branch
        if remote is not None:
            config.remote_name = remote
        if output_dir is not None:
            config.output_dir = str(output_dir)
        if log_file is not None:
            config.log_file = str(log_file)
        if debug:
            config.debug = True

        if config_list:
            print_config(config, repo_path)
            return

        console.print(f"[bold]{get_version_summary()}[/bold]")

        rule_config = RuleConfig.load(repo_path, console)
        validator = create_validator(repo_path, config, rule_config=rule_config, console=console)
        asyncio.run(validator.run(from_sha, to_sha))
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        raise click.Abort()
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise click.Abort()


if __name__ == "__main__":
    main()
