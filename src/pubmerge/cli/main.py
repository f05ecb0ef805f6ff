"""Command-line interface for pubmerge.

Provides CLI commands for normalizing source files and aggregating them.
"""

import importlib.metadata
import sys
import time
from contextlib import nullcontext
from pathlib import Path

import click

__all__ = ["cli"]

try:
    __version__ = importlib.metadata.version("pubmerge")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.3.0"  # Fallback for development


def _parse_source_specs(specs: tuple[str, ...]) -> dict[str, Path]:
    """Parse repeated NAME=PATH options into a mapping."""
    paths: dict[str, Path] = {}
    for spec in specs:
        name, sep, path = spec.partition("=")
        name = name.strip()
        if not sep or not name or not path.strip():
            raise click.BadParameter(f"expected NAME=PATH, got {spec!r}", param_hint="--source")
        if name in paths:
            raise click.BadParameter(f"source {name!r} given twice", param_hint="--source")
        paths[name] = Path(path.strip())
    return paths


@click.group()
@click.version_option(version=__version__, prog_name="pubmerge")
def cli() -> None:
    """Merge publication lists from several bibliographic sources.

    Use 'pubmerge COMMAND --help' for command-specific help.
    """


@cli.command()
@click.argument("source", type=str)
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    required=True,
    help="Output JSONL file path",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
def normalize(
    source: str,
    input_path: str,
    output: str,
    verbose: bool,
) -> None:
    """Normalize one collector output file to SourceRecord JSONL.

    SOURCE selects the adapter (orcid, scholar, ora, wos, scopus, crossref,
    semantic_scholar); other names read SourceRecord field names directly.

    Examples
    --------
        pubmerge normalize crossref crossref.json -o crossref.jsonl
    """
    from pubmerge import load_source_file, write_jsonl
    from pubmerge.normalize import normalize_records

    try:
        raws = load_source_file(input_path)
        if verbose:
            click.echo(f"Loaded {len(raws)} raw records from {input_path}", err=True)

        records, dropped = normalize_records(source, raws)
        if verbose and dropped:
            click.echo(f"Dropped {dropped} malformed records", err=True)

        count = write_jsonl(records, output)
        click.secho(f"✓ Successfully wrote {count} records to {output}", fg="green")

    except Exception as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--source",
    "-s",
    "source_specs",
    multiple=True,
    required=True,
    help="Source file as NAME=PATH (repeatable)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default=None,
    help="Write the full result as JSON to this path",
)
@click.option(
    "--order",
    type=str,
    default=None,
    help="Comma-separated processing order (default: orcid,scholar,ora,wos,scopus,"
    "crossref,semantic_scholar)",
)
@click.option(
    "--authoritative-source",
    type=str,
    default="crossref",
    help="Source whose author strings overwrite earlier ones (default: crossref)",
)
@click.option(
    "--log",
    "log_path",
    type=click.Path(),
    default=None,
    help="Append JSONL audit events to this path",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
def aggregate(
    source_specs: tuple[str, ...],
    output: str | None,
    order: str | None,
    authoritative_source: str,
    log_path: str | None,
    verbose: bool,
) -> None:
    """Aggregate several source files into one publication list.

    Examples
    --------
        pubmerge aggregate -s orcid=orcid.json -s crossref=crossref.json -o pubs.json
        pubmerge aggregate -s scholar=s.json -s wos=w.json --order wos,scholar
    """
    from pubmerge import AggregationConfig, aggregate_files, write_json
    from pubmerge.audit import AuditLogger, generate_run_id

    try:
        paths = _parse_source_specs(source_specs)
        config_kwargs: dict[str, object] = {"authoritative_source": authoritative_source}
        if order:
            config_kwargs["source_order"] = [s.strip() for s in order.split(",") if s.strip()]
        config = AggregationConfig(**config_kwargs)  # type: ignore[arg-type]

        if verbose:
            click.echo("Starting aggregation...", err=True)
            for name, path in paths.items():
                click.echo(f"  {name}: {path}", err=True)
            click.echo(f"  Order: {','.join(config.source_order)}", err=True)

        logger_cm = (
            AuditLogger(generate_run_id(), Path(log_path)) if log_path else nullcontext()
        )
        with logger_cm as logger:
            start_time = time.perf_counter()
            if logger:
                logger.run_started(command=sys.argv, parameters=config.to_dict())

            result = aggregate_files(paths, config=config, logger=logger)

            if logger:
                status = "partial" if result.summary.failed_sources else "success"
                logger.run_finished(
                    status=status,
                    duration_seconds=time.perf_counter() - start_time,
                    publications=len(result.publications),
                )

        if output:
            write_json(result, output)

        summary = result.summary
        metrics = result.metrics

        for source in summary.skipped_sources:
            click.secho(f"! Skipped {source}: not in processing order", fg="yellow", err=True)
        for source in summary.failed_sources:
            click.secho(f"✗ Source {source} failed; see audit log", fg="red", err=True)

        if verbose:
            click.echo("\nPer source:", err=True)
            for name, stats in summary.per_source.items():
                click.echo(
                    f"  {name}: {stats.received} in, {stats.merged} merged, "
                    f"{stats.inserted} new, {stats.duplicates_removed} duplicates, "
                    f"{stats.dropped} dropped",
                    err=True,
                )
            if output:
                click.echo(f"\nOutput: {output}", err=True)

        click.secho(
            f"✓ {metrics.total_publications} publications, "
            f"{metrics.total_citations} citations, "
            f"h-index {metrics.h_index}, i10-index {metrics.i10_index}",
            fg="green",
        )

    except Exception as e:
        click.secho(f"✗ Error: {e}", fg="red", err=True)
        if verbose:
            import traceback

            click.echo(traceback.format_exc(), err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
