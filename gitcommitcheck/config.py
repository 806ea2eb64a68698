"""Configuration management for git-commit-check."""
from pathlib import Path
from typing import ClassVar, Dict, Optional, Tuple
from pydantic import BaseModel, Field, ValidationError
from rich.console import Console
from rich.markup import escape
import tempfile
import tomli
import tomli_w
import os
import re

DEFAULT_CONFIG_FILENAME = ".gitcommitcheck.toml"
CONFIG_SECTION = "gitcommitcheck"
REPORT_FILENAME = "qa-validate-commits-output.json"

TRUE_VALUES = ['true', '1', 'yes', 'on']


def _sanitize_string(value: str) -> str:
    """Strip control characters and surrounding whitespace."""
    if not value:
        return value
    value = re.sub(r'[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]', '', value)
    return value.strip()


class Config(BaseModel):
    """Configuration settings for git-commit-check.

    Built once at the process boundary. Values come from defaults, then the
    ``[gitcommitcheck]`` table of the config file, then environment
    variables; command line options are applied on top by the CLI. Nothing
    below the CLI reads the environment.
    """

    base_branch: str = Field(
        default="main",
        description="Integration branch used to find the merge-base"
    )

    remote_name: str = Field(
        default="origin",
        description="Remote that holds the base branch (e.g., origin, upstream)"
    )

    output_dir: str = Field(
        default_factory=tempfile.gettempdir,
        description="Directory the JSON report is written to"
    )

    github_output: Optional[str] = Field(
        default=None,
        description="GitHub Actions output file; key/value blocks are appended when set"
    )

    annotations: bool = Field(
        default=False,
        description="Whether to emit GitHub Actions ::warning annotations for invalid commits"
    )

    debug: bool = Field(
        default=False,
        description="Whether to print debug output"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Optional file that receives a timestamped line per validated commit"
    )

    # Environment variable -> field, read only by env_overrides()
    ENV_MAPPING: ClassVar[Dict[str, str]] = {
        'BASE_BRANCH': 'base_branch',
        'GIT_COMMIT_CHECK_REMOTE_NAME': 'remote_name',
        'QA_OUTPUT_DIR': 'output_dir',
        'GITHUB_OUTPUT': 'github_output',
        'GITHUB_ACTIONS': 'annotations',
        'DEBUG': 'debug',
        'GIT_COMMIT_CHECK_LOG_FILE': 'log_file',
    }

    BOOL_FIELDS: ClassVar[Tuple[str, ...]] = ('annotations', 'debug')

    @property
    def report_path(self) -> Path:
        return Path(self.output_dir) / REPORT_FILENAME

    @classmethod
    def env_overrides(cls, environ: Optional[dict] = None) -> dict:
        """Collect config values from environment variables.

        Empty values are treated as unset, so ``BASE_BRANCH=`` keeps the
        default branch.
        """
        environ = os.environ if environ is None else environ
        env_data = {}
        for env_var, field_name in cls.ENV_MAPPING.items():
            value = environ.get(env_var)
            if not value:
                continue
            if field_name in cls.BOOL_FIELDS:
                env_data[field_name] = value.lower() in TRUE_VALUES
            else:
                env_data[field_name] = _sanitize_string(value)
        return env_data

    @classmethod
    def file_overrides(cls, repo_path: Path, console: Optional[Console] = None) -> dict:
        """Collect config values from the ``[gitcommitcheck]`` table of the config file."""
        config_path = repo_path / DEFAULT_CONFIG_FILENAME
        if not config_path.exists():
            return {}

        try:
            with config_path.open('rb') as f:
                config_data = tomli.load(f)
        except (OSError, tomli.TOMLDecodeError) as e:
            # If there's any error reading the config, use defaults
            (console or Console(stderr=True)).print(
                f"[yellow]Warning: Error reading config file: {escape(str(e))}[/yellow]"
            )
            return {}

        section = config_data.get(CONFIG_SECTION, {})
        if not isinstance(section, dict):
            (console or Console(stderr=True)).print(
                f"[yellow]Warning: '{CONFIG_SECTION}' in {DEFAULT_CONFIG_FILENAME} is not a table, "
                "using defaults[/yellow]"
            )
            return {}

        file_data = {}
        for key, value in section.items():
            if key in cls.model_fields:
                file_data[key] = _sanitize_string(value) if isinstance(value, str) else value

        try:
            cls(**file_data)
        except ValidationError as e:
            (console or Console(stderr=True)).print(
                f"[yellow]Warning: Invalid value in config file, using defaults: {escape(str(e))}[/yellow]"
            )
            return {}
        return file_data

    @classmethod
    def load(
        cls,
        repo_path: Path,
        environ: Optional[dict] = None,
        console: Optional[Console] = None,
    ) -> 'Config':
        """Load configuration from the config file and the environment.

        Args:
            repo_path: Path to the git repository
            environ: Environment mapping, defaults to ``os.environ``

        Returns:
            Config: Configuration object with file, environment and default values
        """
        return cls(**{**cls.file_overrides(repo_path, console), **cls.env_overrides(environ)})

    def save(self, repo_path: Path) -> None:
        """Save configuration to the ``[gitcommitcheck]`` table of the config file.

        Other tables (such as ``[rules]``) are preserved.

        Args:
            repo_path: Path to the git repository
        """
        config_path = repo_path / DEFAULT_CONFIG_FILENAME

        data = {}
        if config_path.exists():
            with config_path.open('rb') as f:
                data = tomli.load(f)

        # TOML has no null, drop unset values
        data[CONFIG_SECTION] = {k: v for k, v in self.model_dump().items() if v is not None}

        with config_path.open('wb') as f:
            tomli_w.dump(data, f)
