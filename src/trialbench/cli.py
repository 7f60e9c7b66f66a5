"""Command-line interface for trialbench.

Subcommands:
    trialbench run        Time an executable across workloads and configurations
    trialbench micro      Run the in-process old-vs-new micro benchmarks
    trialbench generate   Write seeded workload fixture files
"""

from __future__ import annotations

import contextlib
import logging
import tempfile
from pathlib import Path

import click

from trialbench import __version__
from trialbench.bench.config import SuiteConfig
from trialbench.bench.errors import CallableFault, PreconditionError
from trialbench.bench.results import AggregateStat, ComparisonResult, SuiteResult
from trialbench.logging import setup_logging

log = logging.getLogger("trialbench")


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """trialbench: measure how much faster the new implementation is."""


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


@main.command()
@click.argument("executable", required=False)
@click.option(
    "--profile",
    "profile_path",
    type=click.Path(exists=True, path_type=Path),
    help="YAML profile defining the suite.",
)
@click.option(
    "--configuration",
    "-c",
    "inline_configurations",
    type=str,
    multiple=True,
    help="Inline configuration: 'name:args' (repeatable).",
)
@click.option(
    "--sizes",
    type=str,
    default=None,
    help="Comma-separated workload sizes (default: 10,25,50,100,200,500,1000).",
)
@click.option("--seed", type=int, default=None, help="Workload random seed (default: 42).")
@click.option(
    "--fixtures-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Where to write fixture files (default: a temporary directory).",
)
@click.option(
    "--keep-fixtures",
    is_flag=True,
    default=False,
    help="Leave fixture files in place after the run.",
)
@click.option("--baseline", type=str, default=None, help="Baseline configuration name.")
@click.option("--candidate", type=str, default=None, help="Candidate configuration name.")
@click.option(
    "--all-pairs",
    is_flag=True,
    default=False,
    help="Compare the baseline against every other configuration.",
)
@click.option(
    "--export",
    "export_fmt",
    type=click.Choice(["csv", "markdown"]),
    default=None,
    help="Also export the results in this format.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Export destination (default: stdout).",
)
@click.option("-v", "--verbose", is_flag=True, help="Show detailed output.")
@click.option("-q", "--quiet", is_flag=True, help="Only show warnings and errors.")
@click.option("--log-file", type=click.Path(dir_okay=False, path_type=Path), default=None)
def run(  # noqa: PLR0913
    executable: str | None,
    profile_path: Path | None,
    inline_configurations: tuple[str, ...],
    sizes: str | None,
    seed: int | None,
    fixtures_dir: Path | None,
    keep_fixtures: bool,
    baseline: str | None,
    candidate: str | None,
    all_pairs: bool,
    export_fmt: str | None,
    output: Path | None,
    verbose: bool,
    quiet: bool,
    log_file: Path | None,
) -> None:
    """Time EXECUTABLE on every workload under every configuration.

    The subject is invoked as ``EXECUTABLE <args> <fixture-file>`` with
    its output discarded.  Only exit status and wall time are recorded.

    \b
    Examples:
        # Stock configurations and sizes
        trialbench run ./src/CDSfold

        # Two inline configurations on small inputs
        trialbench run ./src/CDSfold -c "default:" -c "window_20:-w 20" \\
            --sizes 10,25,50

        # From a YAML profile, exporting Markdown
        trialbench run --profile sweep.yaml --export markdown -o report.md
    """
    from trialbench.bench.config import (
        config_from_profile,
        default_config,
        load_profile,
        parse_inline_configuration,
        parse_sizes,
        validate_config,
    )

    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)

    try:
        cli_overrides: dict[str, object] = {
            "executable": executable,
            "sizes": parse_sizes(sizes) if sizes else None,
            "seed": seed,
            "baseline": baseline,
            "candidate": candidate,
            "fixtures_dir": fixtures_dir,
            "keep_fixtures": keep_fixtures,
        }
        if profile_path:
            config = config_from_profile(load_profile(profile_path), cli_overrides=cli_overrides)
        else:
            config = default_config() if not inline_configurations else SuiteConfig()
            config.executable = executable or ""
            if sizes:
                config.sizes = parse_sizes(sizes)
            if seed is not None:
                config.seed = seed
            config.baseline = baseline
            config.candidate = candidate
            config.fixtures_dir = fixtures_dir
            config.keep_fixtures = keep_fixtures

        for spec in inline_configurations:
            config.add(parse_inline_configuration(spec))
    except (ValueError, FileNotFoundError) as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    if not config.executable:
        click.echo("Error: No executable given (argument or profile 'executable').", err=True)
        raise SystemExit(1)

    errors = validate_config(config)
    for e in errors:
        if e.severity == "warning":
            log.warning("Config warning: %s: %s", e.field, e.message)
    fatal = [e for e in errors if e.severity == "error"]
    if fatal:
        click.echo("Error: Invalid benchmark configuration:", err=True)
        for e in fatal:
            click.echo(f"  {e.field}: {e.message}", err=True)
        raise SystemExit(1)

    try:
        result, stats, comparisons = _run_suite(config, all_pairs=all_pairs)
    except PreconditionError as exc:
        click.echo(f"Error: {exc}", err=True)
        click.echo("Build the subject first, then re-run the benchmark.", err=True)
        raise SystemExit(1) from exc
    except KeyboardInterrupt:
        click.echo("\nBenchmark interrupted.", err=True)
        raise SystemExit(130)  # noqa: B904

    from trialbench.bench.display import format_suite_report

    click.echo()
    click.echo(format_suite_report(result, stats, comparisons))

    if export_fmt:
        from trialbench.bench.export import export_csv, export_markdown

        if export_fmt == "csv":
            text = export_csv(result)
        else:
            text = export_markdown(
                result,
                stats,
                comparisons,
                title=config.name or "Benchmark Results",
            )
        if output:
            output.write_text(text)
            click.echo(f"Exported to {output}")
        else:
            click.echo(text)


def _run_suite(
    config: SuiteConfig,
    *,
    all_pairs: bool = False,
) -> tuple[SuiteResult, dict[str, AggregateStat], list[ComparisonResult]]:
    """Check the subject, write fixtures, run the suite, aggregate.

    Returns:
        Tuple of (SuiteResult, aggregates, comparisons).
    """
    from trialbench.bench.stats import aggregate, compare, compare_all
    from trialbench.bench.subject import ExternalProcessSubject
    from trialbench.bench.suite import BenchmarkSuite
    from trialbench.bench.workload import WorkloadGenerator, write_fixtures

    subject = ExternalProcessSubject(config.executable)
    # Fail before any fixture is written.
    subject.check()

    workloads = WorkloadGenerator(seed=config.seed).generate_batch(config.sizes)

    with contextlib.ExitStack() as stack:
        if config.fixtures_dir is not None:
            fixtures_dir = config.fixtures_dir
        else:
            tmpdir = stack.enter_context(tempfile.TemporaryDirectory(prefix="trialbench-"))
            fixtures_dir = Path(tmpdir)
        log.info("Creating test sequence files in %s", fixtures_dir)
        fixtures = write_fixtures(workloads, fixtures_dir)
        for w in workloads:
            log.debug("  Created: %s (%d symbols)", fixtures[w.id].name, w.size)

        suite = BenchmarkSuite(
            subject,
            workloads,
            list(config.configurations.values()),
            fixtures=fixtures,
        )
        try:
            result = suite.run()
        finally:
            if config.fixtures_dir is not None and not config.keep_fixtures:
                for path in fixtures.values():
                    path.unlink(missing_ok=True)

    stats = aggregate(result.by_configuration())
    if all_pairs and config.baseline_name:
        comparisons = compare_all(stats, config.baseline_name, result.config_names)
    elif config.baseline_name and config.candidate_name:
        comparisons = [compare(stats, config.baseline_name, config.candidate_name)]
    else:
        comparisons = []
    return result, stats, comparisons


# ---------------------------------------------------------------------------
# micro
# ---------------------------------------------------------------------------


@main.command()
@click.option(
    "--iterations",
    type=int,
    default=None,
    help="Calls per variant (default: per-case).",
)
@click.option(
    "--case",
    "case_names",
    type=str,
    multiple=True,
    help="Only run this case (repeatable).",
)
@click.option("--seed", type=int, default=42, show_default=True, help="Test data seed.")
@click.option("-v", "--verbose", is_flag=True, help="Show detailed output.")
def micro(iterations: int | None, case_names: tuple[str, ...], seed: int, verbose: bool) -> None:
    """Time old and new routines in-process and report the improvement.

    \b
    Cases: minmax, matrix_size, array_clear, data_access
    """
    from trialbench.bench.display import format_micro_report
    from trialbench.bench.micro import default_cases, run_micro_suite, select_cases

    setup_logging(verbose=verbose)

    if iterations is not None and iterations < 1:
        click.echo(f"Error: --iterations must be at least 1 (got {iterations}).", err=True)
        raise SystemExit(1)

    try:
        cases = select_cases(default_cases(seed=seed, iterations=iterations), case_names)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    click.echo("Micro-Benchmark Suite")
    click.echo(f"Seed: {seed}")
    try:
        results = run_micro_suite(cases)
    except CallableFault as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    click.echo(format_micro_report(results))


# ---------------------------------------------------------------------------
# generate
# ---------------------------------------------------------------------------


@main.command()
@click.option(
    "--sizes",
    type=str,
    default=None,
    help="Comma-separated workload sizes (default: 10,25,50,100,200,500,1000).",
)
@click.option("--seed", type=int, default=42, show_default=True, help="Random seed.")
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
)
def generate(sizes: str | None, seed: int, output_dir: Path) -> None:
    """Write seeded fixture files (test_<size>.faa)."""
    from trialbench.bench.config import parse_sizes
    from trialbench.bench.workload import DEFAULT_SIZES, WorkloadGenerator, write_fixture

    try:
        size_list = parse_sizes(sizes) if sizes else list(DEFAULT_SIZES)
        workloads = WorkloadGenerator(seed=seed).generate_batch(size_list)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    click.echo("Creating test sequence files...")
    for w in workloads:
        path = write_fixture(w, output_dir)
        click.echo(f"  Created: {path} ({w.size} amino acids)")
