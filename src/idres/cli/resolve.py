"""CLI commands for entity resolution and screening.

Usage:
    idres resolve RECORDS_FILE [--min-confidence N] [--keywords K ...]
    idres screen NAME [--institution I] (--author A ... | --records FILE)
"""

import json
import sys
from pathlib import Path
from typing import Any

import click


def _load_json_list(path: Path, key: str) -> list[Any]:
    """Load a JSON array, or the array stored under `key` of an object."""
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get(key)
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array or an object with a '{key}' array")
    return data


@click.command()
@click.argument("records_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--min-confidence",
    type=click.IntRange(0, 100),
    default=None,
    help="Minimum confidence to merge records (default from settings)",
)
@click.option(
    "--keywords",
    "-k",
    multiple=True,
    help="Rank entities by relevance to these keywords",
)
@click.option(
    "--exclude-institution",
    default=None,
    help="Drop candidates affiliated with this institution",
)
@click.option(
    "--exclude-name",
    multiple=True,
    help="Drop candidates matching this name",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the report to a file instead of stdout",
)
def resolve(
    records_file: Path,
    min_confidence: int | None,
    keywords: tuple[str, ...],
    exclude_institution: str | None,
    exclude_name: tuple[str, ...],
    output: Path | None,
):
    """Resolve candidate records into canonical entities.

    RECORDS_FILE holds a JSON array of records (or {"records": [...]})
    with at least a name and a source per record.

    Examples:

        # Resolve reviewer candidates
        idres resolve candidates.json

        # Rank by keywords and drop conflicts of interest
        idres resolve candidates.json -k "quantum computing" \\
            --exclude-institution "UC Berkeley" --exclude-name "Jane Doe"
    """
    from ..config import get_settings
    from ..errors import ConfigurationError
    from ..resolution.conflicts import filter_conflicts
    from ..resolution.ranking import rank_entities
    from ..resolution.resolver import EntityResolver

    settings = get_settings()

    try:
        records = _load_json_list(records_file, "records")
        resolver = EntityResolver.from_settings(settings)
    except (OSError, ValueError, ConfigurationError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if min_confidence is not None:
        resolver.min_confidence = min_confidence

    report = resolver.resolve(records)
    entities = report.entities

    if exclude_institution or exclude_name:
        entities = filter_conflicts(
            entities,
            exclude_institution,
            exclude_name,
            min_confidence=settings.conflict_min_confidence,
            institution_matcher=resolver.adjuster.institution_matcher,
            matcher=resolver.matcher,
        )

    if keywords:
        entities = rank_entities(entities, keywords)

    report = report.model_copy(update={"entities": entities})
    payload = report.model_dump_json(indent=2)

    if output:
        output.write_text(payload, encoding="utf-8")
        click.echo(
            f"Resolved {report.records_processed} records into "
            f"{len(entities)} entities ({len(report.skipped)} skipped) -> {output}",
            err=True,
        )
    else:
        click.echo(payload)


@click.command()
@click.argument("name")
@click.option("--institution", default=None, help="Institution of the screened person")
@click.option(
    "--author",
    "-a",
    "authors",
    multiple=True,
    help="Author name to screen against (repeatable)",
)
@click.option(
    "--records",
    "records_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON array of records with an 'authors' field",
)
@click.option(
    "--min-confidence",
    type=click.IntRange(0, 100),
    default=None,
    help="Minimum confidence to report (default from settings)",
)
def screen(
    name: str,
    institution: str | None,
    authors: tuple[str, ...],
    records_file: Path | None,
    min_confidence: int | None,
):
    """Screen a person against author lists.

    Examples:

        idres screen "John Smith" -a "Smith, J." -a "Jane Doe"

        idres screen "John Smith" --institution MIT --records retractions.json
    """
    from ..config import get_settings
    from ..resolution.matcher import TieredNameMatcher
    from ..resolution.screening import find_matches_in_authors, screen_records

    if not authors and records_file is None:
        click.echo("Error: Must specify --author or --records", err=True)
        sys.exit(1)

    settings = get_settings()
    threshold = settings.min_confidence if min_confidence is None else min_confidence
    matcher = TieredNameMatcher.from_settings(settings)

    if records_file is not None:
        try:
            records = _load_json_list(records_file, "records")
        except (OSError, ValueError) as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)

        summary = screen_records(
            name,
            institution,
            [r for r in records if isinstance(r, dict)],
            min_confidence=threshold,
            matcher=matcher,
        )
        click.echo(summary.model_dump_json(indent=2))
        return

    matches = find_matches_in_authors(
        name, institution, list(authors), min_confidence=threshold, matcher=matcher
    )
    click.echo(json.dumps([m.model_dump(mode="json") for m in matches], indent=2))
