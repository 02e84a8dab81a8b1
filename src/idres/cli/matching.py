"""CLI commands for pairwise matching.

Usage:
    idres match "John Smith" "J. Smith" [--variants] [--json]
    idres institutions "UC Berkeley" "University of California, Berkeley"
    idres adjust 85 "Stanford University" "Stanford"
"""

import json
import sys

import click


@click.command()
@click.argument("search")
@click.argument("candidates", nargs=-1, required=True)
@click.option(
    "--variants",
    is_flag=True,
    help="Enable nickname and name-order tiers",
)
@click.option(
    "--min-confidence",
    type=click.IntRange(0, 100),
    default=0,
    help="Hide matches below this confidence",
)
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
def match(
    search: str,
    candidates: tuple[str, ...],
    variants: bool,
    min_confidence: int,
    as_json: bool,
):
    """Match a name against one or more candidate names.

    Examples:

        # Single comparison
        idres match "John Smith" "J. Smith"

        # Rank a reference list, with nickname tiers
        idres match "Bob Jones" "Robert Jones" "Bobby Jones" --variants
    """
    from ..config import get_settings
    from ..resolution.matcher import TieredNameMatcher

    settings = get_settings()
    matcher = TieredNameMatcher.from_settings(settings)
    if variants:
        matcher.name_variants = True

    matches = matcher.match_many(search, candidates, min_confidence=min_confidence)

    if as_json:
        click.echo(json.dumps([m.model_dump(mode="json") for m in matches], indent=2))
        return

    if not matches:
        click.echo(f"No matches for {search!r}")
        return

    for m in matches:
        click.echo(f"{m.result.confidence:>3}  {m.result.tier.value:<24} {m.candidate}")


@click.command()
@click.argument("first")
@click.argument("second")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
def institutions(first: str, second: str, as_json: bool):
    """Check whether two institution strings denote the same organization.

    Examples:

        idres institutions "UC Berkeley" "University of California, San Diego"
    """
    from ..errors import ConfigurationError
    from ..resolution.institutions import InstitutionMatcher

    try:
        matcher = InstitutionMatcher.from_settings()
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    result = matcher.match(first, second)

    if as_json:
        click.echo(result.model_dump_json(indent=2))
        return

    click.echo(f"Match: {'yes' if result.is_match else 'no'}")
    click.echo(f"  Shared tokens: {', '.join(result.shared_tokens) or '-'}")
    if result.shared_campus_token:
        click.echo(f"  Shared campus: {result.shared_campus_token}")


@click.command()
@click.argument("base", type=click.IntRange(0, 100))
@click.argument("search_institution", required=False)
@click.argument("candidate_institution", required=False)
@click.option("--name", default=None, help="Name to check against the common-name list")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
def adjust(
    base: int,
    search_institution: str | None,
    candidate_institution: str | None,
    name: str | None,
    as_json: bool,
):
    """Boost a name-match confidence with institutional agreement.

    Examples:

        idres adjust 50 "Stanford University" "Stanford University"
    """
    from ..resolution.confidence import ConfidenceAdjuster
    from ..resolution.institutions import InstitutionMatcher

    adjuster = ConfidenceAdjuster(InstitutionMatcher.from_settings())
    assessed = adjuster.assess(
        base, search_institution, candidate_institution, name=name
    )

    if as_json:
        click.echo(assessed.model_dump_json(indent=2))
        return

    click.echo(f"Confidence: {assessed.confidence} ({assessed.level.value})")
    if assessed.is_common_name:
        click.secho("  Common name - verify manually", fg="yellow")
