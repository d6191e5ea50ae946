"""Command-line interface for subfetch."""

import asyncio
import sys
from datetime import timedelta
from pathlib import Path

import click

from subfetch import __version__
from subfetch.config import load_config
from subfetch.core.parser import parse_filename
from subfetch.core.pipeline import AcquisitionOrchestrator
from subfetch.core.provider import load_provider
from subfetch.core.scanner import FileScanner
from subfetch.exceptions import ConfigurationError, MediaParseError, SubfetchError, TMDBError
from subfetch.metadata.tmdb import TMDBScraper
from subfetch.models.result import UnitStatus
from subfetch.utils.language import UNDETERMINED, LanguageSet, display_name, missing, normalize_tag
from subfetch.utils.logger import get_logger, setup_logging

STATUS_COLORS = {
    UnitStatus.ACQUIRED: "green",
    UnitStatus.DRY_RUN: "cyan",
    UnitStatus.SKIPPED_COMPLETE: None,
    UnitStatus.SKIPPED_NO_CANDIDATES: "yellow",
    UnitStatus.SKIPPED_BELOW_THRESHOLD: "yellow",
    UnitStatus.FAILED: "red",
}


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (defaults to built-in defaults)",
)
@click.pass_context
def cli(ctx, config):
    """subfetch - Download missing subtitles for your media library."""
    try:
        cfg = load_config(config)
        ctx.ensure_object(dict)
        ctx.obj["config"] = cfg

        setup_logging(cfg.logging)

    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)


def _validate_languages(ctx, param, value):
    tags = []
    for code in value:
        tag = normalize_tag(code)
        if tag == UNDETERMINED:
            raise click.BadParameter(f"{code!r} is not a language tag (e.g. en, pt-BR)")
        tags.append(tag)
    return tuple(tags)


def _build_catalog(config, paths, modified_hours):
    scanner = FileScanner(config.scan.extensions, recursive=config.scan.recursive)
    catalog = scanner.catalog(paths)

    hours = modified_hours or config.scan.modified_within_hours
    if hours:
        catalog = catalog.filter_modified(timedelta(hours=hours))
    return catalog


@cli.command("missing")
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.option(
    "--lang",
    "-l",
    "languages",
    multiple=True,
    callback=_validate_languages,
    help="Wanted language (repeatable)",
)
@click.pass_context
def missing_cmd(ctx, paths, languages):
    """List media missing subtitles in the wanted languages."""
    config = ctx.obj["config"]
    wanted = LanguageSet(languages or config.languages)

    try:
        catalog = _build_catalog(config, paths, None).filter_video()
    except (OSError, ValueError) as e:
        click.secho(f"✗ Error scanning: {e}", fg="red", err=True)
        sys.exit(1)

    count = 0
    for item in catalog:
        langs = missing(wanted, item.languages())
        if langs:
            count += 1
            names = ", ".join(display_name(lang) for lang in langs.ordered())
            click.echo(f"{item} - {names}")

    click.echo("")
    click.echo(f"{count} of {len(catalog)} item(s) missing subtitles")


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.option(
    "--lang",
    "-l",
    "languages",
    multiple=True,
    callback=_validate_languages,
    help="Wanted language (repeatable)",
)
@click.option("--dry/--no-dry", default=None, help="Only report what would be downloaded")
@click.option("--strict/--no-strict", default=None, help="Abort on the first failure")
@click.option("--impaired/--no-impaired", default=None, help="Allow hearing-impaired subtitles")
@click.option("--score", type=click.IntRange(0, 100), default=None, help="Minimum score (percent)")
@click.option("--delay", type=click.FloatRange(min=0), default=None, help="Seconds between languages")
@click.option("--modified", type=float, default=None, help="Only media modified in the last N hours")
@click.pass_context
def download(ctx, paths, languages, dry, strict, impaired, score, delay, modified):
    """Download missing subtitles for all media in PATHS."""
    config = ctx.obj["config"]
    logger = get_logger(__name__)

    overrides = {
        key: value
        for key, value in {
            "dry": dry,
            "strict": strict,
            "impaired": impaired,
            "score": score,
            "delay": delay,
        }.items()
        if value is not None
    }
    config = config.model_copy(
        update={"acquisition": config.acquisition.model_copy(update=overrides)}
    )
    wanted = list(languages) or config.languages

    if not config.provider:
        click.secho("✗ No subtitle provider configured", fg="red", err=True)
        sys.exit(1)

    try:
        catalog = _build_catalog(config, paths, modified)
        provider = load_provider(config.provider, **config.provider_options)
    except (OSError, ValueError, ConfigurationError) as e:
        click.secho(f"✗ {e}", fg="red", err=True)
        sys.exit(1)

    async def _download():
        orchestrator = AcquisitionOrchestrator(config, provider)
        try:
            return await orchestrator.acquire(catalog, wanted)
        finally:
            await provider.close()

    try:
        result = asyncio.run(_download())
    except SubfetchError as e:
        logger.error("Download failed", error=str(e))
        partial = getattr(e, "partial", None)
        if partial is not None:
            for outcome in partial.outcomes:
                click.secho(f"  {outcome}", fg=STATUS_COLORS[outcome.status])
        click.secho(f"✗ {e}", fg="red", err=True)
        sys.exit(1)

    for outcome in result.outcomes:
        if outcome.status != UnitStatus.SKIPPED_COMPLETE:
            click.secho(f"  {outcome}", fg=STATUS_COLORS[outcome.status])

    summary = result.summary()
    click.echo("=" * 60)
    click.echo("Summary:")
    click.secho(f"  ✓ Downloaded:   {summary['acquired']}", fg="green")
    click.secho(f"  ⊙ Dry run:      {summary['dry_run']}", fg="cyan")
    click.secho(f"  ⊘ Not found:    {summary['skipped_no_candidates']}", fg="yellow")
    click.secho(f"  ⊘ Score too low: {summary['skipped_below_threshold']}", fg="yellow")
    click.secho(f"  ✗ Failed:       {summary['failed']}", fg="red")

    if summary["failed"] > 0:
        sys.exit(1)


@cli.command()
@click.argument("file", type=click.Path(path_type=Path))
@click.pass_context
def info(ctx, file):
    """Show how a media filename is understood."""
    config = ctx.obj["config"]

    try:
        media = parse_filename(file.name)
    except MediaParseError as e:
        click.secho(f"✗ {e}", fg="red", err=True)
        sys.exit(1)

    click.echo(f"Media:    {media}")
    click.echo(f"Metadata: {str(media.meta) or '-'}")

    if not config.tmdb.enabled:
        return

    async def _scrape():
        scraper = TMDBScraper(config.tmdb.api_key)
        try:
            return await scraper.scrape(media)
        finally:
            await scraper.close()

    try:
        scraped = asyncio.run(_scrape())
    except TMDBError as e:
        click.secho(f"✗ TMDB: {e}", fg="red", err=True)
        sys.exit(1)

    click.echo(f"TMDB:     {scraped}")


@cli.command()
def version():
    """Show version information."""
    click.echo(f"subfetch v{__version__}")


def main():
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
