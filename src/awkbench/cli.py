"""Command-line interface for awkbench.

Subcommands:
    awkbench run         Generate data, benchmark every available AWK, write reports
    awkbench generate    Only generate the benchmark datasets
    awkbench candidates  List declared AWK implementations and where they resolve
    awkbench show        Print the summary of a saved results.json
"""

from __future__ import annotations

from pathlib import Path

import click

from awkbench import __version__
from awkbench.bench.config import REPORT_FORMATS, BenchConfig, check_config, config_from_profile
from awkbench.logging import get_logger, setup_logging

log = get_logger("cli")


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """awkbench: benchmark AWK implementations against each other."""


def _build_config(profile_path: Path | None, cli_overrides: dict[str, object]) -> BenchConfig:
    from awkbench.bench.config import load_profile

    profile_data = load_profile(profile_path) if profile_path else {}
    config = config_from_profile(profile_data, cli_overrides=cli_overrides)
    check_config(config)
    return config


def _generate(config: BenchConfig) -> dict[str, Path]:
    from awkbench.bench.dataset import DatasetGenerator

    click.echo(f"Generating test data ({config.size})...")
    files = DatasetGenerator(config.seed).generate_all(config.data_dir, config.size_bytes)
    click.echo(f"Generated {len(files)} datasets in {config.data_dir}")
    return files


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


@main.command("run")
@click.option(
    "--profile",
    "profile_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML profile with settings and candidate definitions.",
)
@click.option(
    "--data",
    "data_dir",
    type=click.Path(path_type=Path),
    default=None,
    help="Directory for test data (default: testdata).",
)
@click.option(
    "--programs",
    "programs_dir",
    type=click.Path(path_type=Path),
    default=None,
    help="Directory with AWK programs (default: programs).",
)
@click.option(
    "--output",
    "output_dir",
    type=click.Path(path_type=Path),
    default=None,
    help="Directory for results (default: results).",
)
@click.option(
    "--size",
    type=str,
    default=None,
    help="Dataset size: 1MB, 10MB, 100MB, 500MB (default: 10MB).",
)
@click.option("--runs", type=int, default=None, help="Measured runs (default: 5).")
@click.option("--warmup", type=int, default=None, help="Warm-up runs (default: 1).")
@click.option(
    "--timeout",
    type=float,
    default=None,
    help="Per-run timeout in seconds (default: 300).",
)
@click.option(
    "--awk",
    "awk_list",
    type=str,
    default=None,
    help="Comma-separated AWKs to test (default: all available).",
)
@click.option(
    "--candidate",
    "inline_candidates",
    type=str,
    multiple=True,
    help="Extra AWK as 'name=command [args]', added to the declared set (repeatable).",
)
@click.option(
    "--format",
    "formats",
    type=click.Choice([*REPORT_FORMATS, "all"]),
    multiple=True,
    help="Report format (repeatable, default: all).",
)
@click.option("--seed", type=int, default=None, help="Dataset random seed (default: 42).")
@click.option(
    "--generate",
    "generate_only",
    is_flag=True,
    default=False,
    help="Only generate test data, do not benchmark.",
)
@click.option("-v", "--verbose", is_flag=True, help="Show every run.")
@click.option("-q", "--quiet", is_flag=True, help="Only show errors.")
@click.option("--log-file", type=click.Path(path_type=Path), default=None)
def run(  # noqa: PLR0913
    profile_path: Path | None,
    data_dir: Path | None,
    programs_dir: Path | None,
    output_dir: Path | None,
    size: str | None,
    runs: int | None,
    warmup: int | None,
    timeout: float | None,
    awk_list: str | None,
    inline_candidates: tuple[str, ...],
    formats: tuple[str, ...],
    seed: int | None,
    generate_only: bool,
    verbose: bool,
    quiet: bool,
    log_file: Path | None,
) -> None:
    """Benchmark every available AWK on every program.

    \b
    Examples:
        awkbench run --size 1MB --runs 3
        awkbench run --awk gawk,mawk --format markdown
        awkbench run --candidate "bwk=/opt/bwk/awk" --profile bench.yaml
    """
    from awkbench.bench.candidates import filter_available, parse_candidate
    from awkbench.bench.programs import build_jobs, discover_programs
    from awkbench.bench.report import format_duration, write_reports
    from awkbench.bench.runner import BenchProgress, BenchRunner
    from awkbench.bench.system import capture_system_info

    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)

    try:
        extra = [parse_candidate(spec) for spec in inline_candidates]
        config = _build_config(
            profile_path,
            {
                "data_dir": data_dir,
                "programs_dir": programs_dir,
                "output_dir": output_dir,
                "size": size,
                "runs": runs,
                "warmup": warmup,
                "timeout": timeout,
                "awk_filter": awk_list,
                "formats": list(formats) or None,
                "seed": seed,
                "generate_only": generate_only or None,
                "candidates": extra,
            },
        )
    except (ValueError, FileNotFoundError) as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc
    log.debug("Configuration: %s", config)

    try:
        datasets = _generate(config)
    except OSError as exc:
        click.echo(f"Error: generating test data: {exc}", err=True)
        raise SystemExit(1) from exc
    if config.generate_only:
        _echo_datasets(datasets)
        return

    awks = filter_available(config.declared_candidates())
    if not awks:
        click.echo("Error: no AWK implementations found", err=True)
        raise SystemExit(1)
    click.echo(f"Testing AWK implementations: {', '.join(a.name for a in awks)}")

    try:
        programs = discover_programs(config.programs_dir)
        if not programs:
            raise FileNotFoundError(f"no AWK programs found in {config.programs_dir}")
        jobs = build_jobs(programs, datasets, config.program_datasets)
    except (FileNotFoundError, KeyError) as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    click.echo(f"Running {len(jobs)} programs with {config.runs} runs each...")
    click.echo()

    current: list[str] = []

    def on_progress(p: BenchProgress) -> None:
        BenchRunner._default_progress(p)
        if p.phase not in ("done", "failed"):
            return
        if not current or current[-1] != p.program:
            if current:
                click.echo()
            current.append(p.program)
            click.echo(f"{p.program:<20s} ", nl=False)
        if p.phase == "done":
            click.echo(f"{p.candidate}:{format_duration(p.elapsed_ns)} ", nl=False)
        else:
            click.echo(f"{p.candidate}:ERR ", nl=False)

    runner = BenchRunner(config, progress_callback=on_progress)
    try:
        session = runner.run_session(awks, jobs)
    except KeyboardInterrupt:
        click.echo("\nBenchmark interrupted.", err=True)
        raise SystemExit(130)  # noqa: B904
    if current:
        click.echo()

    try:
        paths = write_reports(
            config.output_dir,
            session,
            config.formats,
            system=capture_system_info(),
        )
    except OSError as exc:
        click.echo(f"Error: writing reports: {exc}", err=True)
        raise SystemExit(1) from exc
    if paths:
        click.echo(f"\nResults written to {paths[0]}")


def _echo_datasets(datasets: dict[str, Path]) -> None:
    from awkbench.formatting import format_size

    for name, path in datasets.items():
        click.echo(f"  {name}: {path} ({format_size(path.stat().st_size)})")


# ---------------------------------------------------------------------------
# generate
# ---------------------------------------------------------------------------


@main.command("generate")
@click.option(
    "--data",
    "data_dir",
    type=click.Path(path_type=Path),
    default=Path("testdata"),
    show_default=True,
    help="Directory for test data.",
)
@click.option(
    "--size",
    type=str,
    default="10MB",
    show_default=True,
    help="Dataset size: 1MB, 10MB, 100MB, 500MB.",
)
@click.option("--seed", type=int, default=42, show_default=True)
@click.option("-v", "--verbose", is_flag=True, help="Show detailed output.")
def generate(data_dir: Path, size: str, seed: int, verbose: bool) -> None:
    """Generate the benchmark datasets without running anything."""
    setup_logging(verbose=verbose)
    config = BenchConfig(data_dir=data_dir, size=size, seed=seed)
    try:
        config.size_bytes
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--size") from exc
    try:
        _echo_datasets(_generate(config))
    except OSError as exc:
        click.echo(f"Error: generating test data: {exc}", err=True)
        raise SystemExit(1) from exc


# ---------------------------------------------------------------------------
# candidates
# ---------------------------------------------------------------------------


@main.command("candidates")
@click.option(
    "--profile",
    "profile_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML profile with candidate definitions.",
)
def candidates(profile_path: Path | None) -> None:
    """List declared AWK implementations and where each resolves."""
    from awkbench.bench.candidates import resolve_command
    from awkbench.formatting import format_table

    try:
        config = _build_config(profile_path, {})
    except (ValueError, FileNotFoundError) as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    rows: list[list[str]] = []
    for cand in config.declared_candidates():
        path = resolve_command(cand.command)
        rows.append([cand.name, " ".join([cand.command, *cand.args]), path or "not found"])
    click.echo(format_table(["AWK", "Invocation", "Resolved"], rows, max_col_width={1: 40}))


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


@main.command("show")
@click.argument("results_json", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def show(results_json: Path) -> None:
    """Print the Markdown report for a saved RESULTS_JSON file."""
    from awkbench.bench.report import export_markdown
    from awkbench.bench.results import load_results

    try:
        session, generated = load_results(results_json)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    click.echo(
        export_markdown(
            session.results,
            session.ranking,
            failures=session.failures,
            generated=generated or None,
        )
    )
