"""
CLI for daily-wallpaper.

Commands:
- fetch: Download the latest images into the cache
- latest: Print the path of the newest cached image
- info: Show configuration and cache status

Exit codes: 0 on success, 1 when an operation fails, 2 for user errors.
"""

import asyncio

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .cache import ImageCache
from .config import settings
from .errors import DailyWallpaperError, InvalidRangeError
from .logging import setup_logging
from .mutations import DescriptiveTextMutation, MutationPipeline
from .sources import MAX_FETCHABLE, BingImageClient

SYSTEM_ERROR_CODE = 1
USER_ERROR_CODE = 2

app = typer.Typer(
    name="daily-wallpaper",
    help="Cache Bing's image of the day for use as a wallpaper",
)
console = Console()
err_console = Console(stderr=True)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """daily-wallpaper - local cache of Bing images of the day."""
    log_level = "DEBUG" if verbose else settings.log_level
    setup_logging(level=log_level, json_output=settings.log_json, log_file=settings.log_file)
    logger.debug("CLI initialized with log level: {}", log_level)


def _open_cache() -> ImageCache:
    try:
        return ImageCache.open(
            settings.cache_path,
            max_entries=settings.max_cache_size,
            manifest_path=settings.manifest_path,
        )
    except (ValueError, OSError) as e:
        logger.error("Could not open image cache: {}", e)
        err_console.print(f"[red]Failure: could not open image cache: {escape(str(e))}[/]")
        raise typer.Exit(SYSTEM_ERROR_CODE) from e


async def _fetch_images(cache: ImageCache, count: int, watermark: bool, silent: bool) -> int:
    """Fetch ``count`` images into the cache and return how many were new."""
    client = BingImageClient(market=settings.market, timeout=settings.request_timeout)
    images = await client.fetch_latest(count)

    pipeline = None
    if watermark:
        pipeline = MutationPipeline(
            DescriptiveTextMutation(font_size=settings.watermark_font_size)
        )

    added = 0
    for image in images:
        cached = await cache.download_and_cache(image, client, pipeline)
        added += cached
        if not silent:
            if cached:
                console.print(f"Cached image {image.id}")
            else:
                console.print(f"Image {image.id} was already cached")
    return added


@app.command()
def fetch(
    count: int = typer.Option(
        1,
        "--count",
        "-n",
        min=1,
        max=MAX_FETCHABLE,
        help=f"Number of images to fetch (1-{MAX_FETCHABLE})",
    ),
    silent: bool = typer.Option(False, "--silent", "-s", help="Suppress output"),
    watermark: bool = typer.Option(
        settings.watermark,
        "--watermark/--no-watermark",
        help="Draw the image description onto each image",
    ),
):
    """Fetch the latest images from Bing and cache them locally."""
    logger.info("Fetching {} image(s) (watermark={})", count, watermark)
    cache = _open_cache()

    try:
        added = asyncio.run(_fetch_images(cache, count, watermark, silent))
    except InvalidRangeError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(USER_ERROR_CODE) from e
    except (DailyWallpaperError, OSError) as e:
        logger.error("Fetch failed: {}", e)
        err_console.print(f"[red]Failure: fetch failed: {escape(str(e))}[/]")
        raise typer.Exit(SYSTEM_ERROR_CODE) from e

    logger.info("Fetch complete: {} new image(s), {} cached", added, len(cache))


@app.command()
def latest(
    fetch: bool = typer.Option(
        False, "--fetch", "-f", help="Fetch today's image from Bing before answering"
    ),
    no_error: bool = typer.Option(
        False, "--no-error", "-x", help="Suppress errors while processing this command"
    ),
):
    """Print the local path of the newest cached image."""
    cache = _open_cache()

    if fetch:
        try:
            asyncio.run(_fetch_images(cache, 1, settings.watermark, silent=True))
        except (DailyWallpaperError, OSError) as e:
            if not no_error:
                logger.error("Fetch failed: {}", e)
                err_console.print(f"[red]Failure: fetch failed: {escape(str(e))}[/]")
                raise typer.Exit(SYSTEM_ERROR_CODE) from e
            logger.debug("Ignoring fetch failure: {}", e)

    image = cache.get_latest()
    if image is None:
        if no_error:
            return
        err_console.print(
            "[red]Error: there are no images in the cache. "
            "Use the 'fetch' command to get images first.[/]"
        )
        raise typer.Exit(USER_ERROR_CODE)

    typer.echo(str(cache.make_image_file_path(image)))


@app.command()
def info():
    """Show configuration and image cache status."""
    logger.debug("Displaying configuration and status")
    console.print("[bold blue]daily-wallpaper Configuration[/]")

    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Cache Directory", str(settings.cache_path))
    table.add_row("Manifest", str(settings.manifest_path))
    table.add_row("Max Cache Size", str(settings.max_cache_size))
    table.add_row("Market", settings.market)
    table.add_row("Request Timeout", f"{settings.request_timeout}s")
    table.add_row("Watermark", str(settings.watermark))
    console.print(table)

    console.print("\n[bold]Image Cache Status[/]")
    if not settings.cache_path.exists():
        console.print("Image cache not initialized (run fetch first)")
        return

    cache = _open_cache()
    console.print(f"Cached images: {len(cache)}/{cache.max_entries}")
    if len(cache):
        images = Table()
        images.add_column("Date", style="cyan")
        images.add_column("ID")
        images.add_column("Title", style="green")
        for image in reversed(cache.entries):
            images.add_row(image.source_date.isoformat(), image.id, image.title)
        console.print(images)


if __name__ == "__main__":
    app()
