"""Benchmark configuration and profile loading.

Handles:
- Declaring the configurations (named argument sets) a suite compares.
- Loading suite profiles from YAML files.
- Parsing inline configuration definitions from CLI arguments.
- Merging CLI options with profile defaults.
- Validating the final configuration before execution.
"""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from trialbench.bench.workload import DEFAULT_SEED, DEFAULT_SIZES

log = logging.getLogger("trialbench")


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Configuration:
    """A named variant of the subject's invocation parameters.

    ``args`` is passed verbatim as option flags, e.g. ``"-w 20"``.
    """

    name: str
    args: str = ""
    description: str = ""

    def argv(self) -> list[str]:
        """Split ``args`` into arguments with shell quoting rules.

        Raises:
            ValueError: If the quoting is unbalanced.
        """
        try:
            return shlex.split(self.args)
        except ValueError as exc:
            raise ValueError(
                f"Configuration '{self.name}' has invalid arguments {self.args!r}: {exc}"
            ) from None


DEFAULT_CONFIGURATIONS: tuple[Configuration, ...] = (
    Configuration("default", ""),
    Configuration("window_20", "-w 20"),
    Configuration("window_50", "-w 50"),
    Configuration("exclude_codons", "-e GUA,GUC,CUG"),
    Configuration("reverse_opt", "-r"),
)


# ---------------------------------------------------------------------------
# SuiteConfig
# ---------------------------------------------------------------------------


@dataclass
class SuiteConfig:
    """Resolved configuration for one suite run."""

    executable: str = ""
    name: str = ""
    sizes: list[int] = field(default_factory=lambda: list(DEFAULT_SIZES))
    seed: int = DEFAULT_SEED
    configurations: dict[str, Configuration] = field(default_factory=dict)

    # Comparison pair; defaults to the first two configurations.
    baseline: str | None = None
    candidate: str | None = None

    # Fixtures are written to a temporary directory when this is None.
    fixtures_dir: Path | None = None
    keep_fixtures: bool = False

    @property
    def baseline_name(self) -> str | None:
        if self.baseline:
            return self.baseline
        names = list(self.configurations)
        return names[0] if names else None

    @property
    def candidate_name(self) -> str | None:
        if self.candidate:
            return self.candidate
        names = [n for n in self.configurations if n != self.baseline_name]
        return names[0] if names else None

    def add(self, configuration: Configuration) -> None:
        """Declare a configuration; a repeated name replaces the old entry."""
        if configuration.name in self.configurations:
            log.warning("Configuration '%s' redefined", configuration.name)
        self.configurations[configuration.name] = configuration


def default_config(executable: str = "") -> SuiteConfig:
    """SuiteConfig with the stock sizes and configurations."""
    config = SuiteConfig(executable=executable)
    for c in DEFAULT_CONFIGURATIONS:
        config.configurations[c.name] = c
    return config


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@dataclass
class ValidationError:
    """A single configuration validation error."""

    field: str
    message: str
    severity: str = "error"  # "error" or "warning"


def validate_config(config: SuiteConfig) -> list[ValidationError]:
    """Validate a suite configuration.

    Returns a list of validation errors.  Empty list means valid.
    """
    errors: list[ValidationError] = []

    if not config.configurations:
        errors.append(
            ValidationError(
                field="configurations",
                message=(
                    "No configurations defined. "
                    "Use --profile or --configuration to define at least one."
                ),
            )
        )

    for name in config.configurations:
        if not name or not name.strip():
            errors.append(
                ValidationError(
                    field="configurations",
                    message="Configuration names must be non-empty.",
                )
            )

    for configuration in config.configurations.values():
        try:
            configuration.argv()
        except ValueError as exc:
            errors.append(ValidationError(field="configurations", message=str(exc)))

    if not config.sizes:
        errors.append(
            ValidationError(field="sizes", message="At least one workload size is required.")
        )
    for size in config.sizes:
        if not isinstance(size, int) or isinstance(size, bool) or size < 0:
            errors.append(
                ValidationError(
                    field="sizes",
                    message=f"Workload sizes must be non-negative integers (got {size!r}).",
                )
            )
    if len(set(config.sizes)) != len(config.sizes):
        errors.append(
            ValidationError(field="sizes", message="Workload sizes must be unique.")
        )

    for role, name in (("baseline", config.baseline), ("candidate", config.candidate)):
        if name and name not in config.configurations:
            errors.append(
                ValidationError(
                    field=role,
                    message=(
                        f"{role.capitalize()} '{name}' is not a declared configuration. "
                        f"Available: {', '.join(config.configurations) or '(none)'}"
                    ),
                )
            )

    if config.baseline_name and config.baseline_name == config.candidate_name:
        errors.append(
            ValidationError(
                field="candidate",
                message="Baseline and candidate are the same configuration.",
                severity="warning",
            )
        )

    return errors


# ---------------------------------------------------------------------------
# YAML profile loading
# ---------------------------------------------------------------------------


def load_profile(profile_path: Path) -> dict[str, Any]:
    """Load a suite profile from a YAML file.

    Profile format::

        name: "window sweep"
        executable: "./src/CDSfold"
        sizes: [10, 25, 50]
        seed: 42
        baseline: default
        candidate: window_20

        configurations:
          default: ""
          window_20:
            args: "-w 20"
            description: "Window size 20"

    Returns:
        The parsed YAML as a dict.
    """
    if not profile_path.exists():
        raise FileNotFoundError(f"Profile not found: {profile_path}")

    data = yaml.safe_load(profile_path.read_text())

    if not isinstance(data, dict):
        raise ValueError(f"Profile must be a YAML mapping, got {type(data).__name__}")

    return data


def config_from_profile(
    profile_data: dict[str, Any],
    *,
    cli_overrides: dict[str, Any] | None = None,
) -> SuiteConfig:
    """Build a SuiteConfig from a parsed YAML profile.

    CLI overrides take precedence over profile values.  Keys match
    SuiteConfig field names; ``None`` values are ignored.
    """
    cli = {k: v for k, v in (cli_overrides or {}).items() if v is not None}

    if "sizes" in cli:
        sizes = cli["sizes"]
    else:
        sizes = profile_data.get("sizes", list(DEFAULT_SIZES))
    if not isinstance(sizes, list):
        raise ValueError("Profile 'sizes' must be a list of integers")

    config = SuiteConfig(
        executable=str(cli.get("executable") or profile_data.get("executable", "")),
        name=cli.get("name") or profile_data.get("name", ""),
        sizes=list(sizes),
        seed=cli.get("seed", profile_data.get("seed", DEFAULT_SEED)),
        baseline=cli.get("baseline") or profile_data.get("baseline"),
        candidate=cli.get("candidate") or profile_data.get("candidate"),
    )

    configurations_data = profile_data.get("configurations", {})
    if not isinstance(configurations_data, dict):
        raise ValueError("Profile 'configurations' must be a mapping of name -> definition")

    for name, cfg_data in configurations_data.items():
        if cfg_data is None:
            cfg_data = ""
        if isinstance(cfg_data, str):
            config.add(Configuration(name=str(name), args=cfg_data))
        elif isinstance(cfg_data, dict):
            config.add(
                Configuration(
                    name=str(name),
                    args=str(cfg_data.get("args", "")),
                    description=cfg_data.get("description", ""),
                )
            )
        else:
            raise ValueError(
                f"Configuration '{name}' must be a string or mapping, "
                f"got {type(cfg_data).__name__}"
            )

    fixtures_dir = cli.get("fixtures_dir") or profile_data.get("fixtures_dir")
    if fixtures_dir:
        config.fixtures_dir = Path(fixtures_dir)
    if cli.get("keep_fixtures") or profile_data.get("keep_fixtures"):
        config.keep_fixtures = True

    return config


# ---------------------------------------------------------------------------
# Inline configuration parsing
# ---------------------------------------------------------------------------


def parse_inline_configuration(spec: str) -> Configuration:
    """Parse an inline configuration from the CLI.

    Format: ``"name:args"``; everything after the first colon is the
    argument string, verbatim.

    Examples::

        "default:"
        "window_20:-w 20"
        "exclude_codons:-e GUA,GUC,CUG"
    """
    if ":" not in spec:
        raise ValueError(f"Invalid configuration spec: '{spec}'. Expected format: 'name:args'")

    name, args = spec.split(":", 1)
    name = name.strip()
    if not name:
        raise ValueError("Configuration name cannot be empty.")

    configuration = Configuration(name=name, args=args.strip())
    configuration.argv()
    return configuration


def parse_sizes(text: str) -> list[int]:
    """Parse a comma-separated list of workload sizes."""
    sizes: list[int] = []
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            sizes.append(int(part))
        except ValueError:
            raise ValueError(f"Invalid workload size: '{part}'") from None
    return sizes
