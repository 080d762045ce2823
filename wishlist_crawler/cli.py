"""Typer entry point: run one crawl and report the outcome."""

import asyncio

import logfire
import sentry_sdk
import typer

from wishlist_crawler.config import get_settings
from wishlist_crawler.exceptions import ConfigurationError, CrawlerError
from wishlist_crawler.logging_config import setup_logfire
from wishlist_crawler.services.pipeline import run_crawl

app = typer.Typer(add_completion=False)


def _report_failure(error: Exception) -> None:
    stage = getattr(error, "stage", "crawl")
    typer.secho(f"Crawl failed during {stage}: {error}", err=True, fg=typer.colors.RED)


@app.command()
def crawl() -> None:
    """Crawl the wishlist portal and push the result to PUSH_URL."""
    try:
        settings = get_settings()
    except ConfigurationError as e:
        _report_failure(e)
        raise typer.Exit(code=1)

    setup_logfire(settings)
    if settings.sentry_dsn:
        sentry_sdk.init(dsn=settings.sentry_dsn, environment=settings.env)

    try:
        response = asyncio.run(run_crawl(settings))
    except CrawlerError as e:
        logfire.error("Crawl run failed", stage=e.stage, error=str(e))
        sentry_sdk.capture_exception(e)
        _report_failure(e)
        raise typer.Exit(code=1)
    except Exception as e:
        logfire.error(
            "Crawl run crashed", error=str(e), error_type=type(e).__name__
        )
        sentry_sdk.capture_exception(e)
        _report_failure(e)
        raise typer.Exit(code=1)

    typer.echo(
        "Pushed results to provided endpoint. "
        "Response from the endpoint is provided below..."
    )
    typer.echo(response.describe())


def main() -> None:
    app()
