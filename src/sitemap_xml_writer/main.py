"""Main CLI entry point for the sitemap writer."""

import logging
import os
import sys
import traceback
from typing import Optional

import click
from click.core import ParameterSource

from .config import (
    DEFAULT_BASE_URL,
    DEFAULT_MAX_URLS_PER_SITEMAP,
    DEFAULT_OUTPUT_DIR,
    MAX_NUMBER_OF_URLS,
    get_config_from_env,
    validate_config,
)
from .generator import create_sitemap_generator, load_entries
from .types import GeneratorConfig
from .utils import format_bytes, format_number, setup_logging


@click.command()
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--output-dir',
    default=DEFAULT_OUTPUT_DIR,
    help='Output directory for sitemaps [env: SITEMAP_OUTPUT_DIR]',
    show_default=True
)
@click.option(
    '--base-url',
    default=DEFAULT_BASE_URL,
    help='Public URL the sitemap files are served from, used in the sitemap index '
         '[env: SITEMAP_BASE_URL]',
    show_default=True
)
@click.option(
    '--max-urls-per-sitemap',
    default=DEFAULT_MAX_URLS_PER_SITEMAP,
    type=click.IntRange(1, MAX_NUMBER_OF_URLS),
    help='Maximum number of URLs per sitemap file [env: SITEMAP_MAX_URLS_PER_SITEMAP]',
    show_default=True
)
@click.option(
    '--pretty/--compact',
    default=False,
    help='Indent the generated XML [env: SITEMAP_PRETTY]',
    show_default=True
)
@click.option(
    '--compress',
    is_flag=True,
    help='Write gzip-compressed sitemaps (.xml.gz) [env: SITEMAP_COMPRESS]'
)
@click.option(
    '--clean',
    is_flag=True,
    help='Remove existing sitemap files from the output directory first'
)
@click.option(
    '--log-level',
    default='INFO',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
    help='Logging level',
    show_default=True
)
@click.option(
    '--log-file',
    help='Log file path (optional)',
    type=click.Path()
)
def main(
    input_file: str,
    output_dir: str,
    base_url: str,
    max_urls_per_sitemap: int,
    pretty: bool,
    compress: bool,
    clean: bool,
    log_level: str,
    log_file: Optional[str]
) -> None:
    """
    Generate sitemaps.org XML sitemaps from INPUT_FILE.

    INPUT_FILE holds one URL per line, or is a CSV file with a "loc" column
    and optional "lastmod", "changefreq" and "priority" columns. Large inputs
    are split over several sitemap files plus a sitemap index.

    Options not given on the command line fall back to the SITEMAP_*
    environment variables, then to the defaults shown.
    """
    setup_logging(log_level, log_file)
    logger = logging.getLogger(__name__)

    try:
        config = build_config(
            output_dir=output_dir,
            base_url=base_url,
            max_urls_per_sitemap=max_urls_per_sitemap,
            pretty=pretty,
            compress=compress,
        )
        validate_config(config)
    except ValueError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    try:
        generator = create_sitemap_generator(config)

        if clean:
            generator.cleanup_old_sitemaps()

        sitemap_files = generator.generate_sitemaps(
            load_entries(input_file, config.max_loc_length)
        )

        print_summary(sitemap_files, generator.index_file)

    except KeyboardInterrupt:
        logger.info("Process interrupted by user")
        sys.exit(130)  # Standard exit code for SIGINT

    except Exception as e:
        logger.error(f"Fatal error: {e}")
        if log_level == 'DEBUG':
            traceback.print_exc()
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def build_config(**options) -> GeneratorConfig:
    """
    Merge command line options over the environment configuration.

    Options left at their click default take the environment value instead.
    Raises ValueError for unparsable environment values.
    """
    config = get_config_from_env()
    ctx = click.get_current_context()

    for name, value in options.items():
        if ctx.get_parameter_source(name) is not ParameterSource.DEFAULT:
            setattr(config, name, value)

    return config


def print_summary(sitemap_files, index_file: Optional[str]) -> None:
    """Print the generated files."""
    if not sitemap_files:
        click.echo("No sitemaps generated: the input holds no valid URLs")
        return

    click.echo(f"Generated {format_number(len(sitemap_files))} sitemap file(s):")
    for sitemap_file in sitemap_files:
        click.echo(f"  {sitemap_file} ({format_bytes(os.path.getsize(sitemap_file))})")

    if index_file:
        click.echo(f"Sitemap index: {index_file}")


if __name__ == '__main__':
    main()
