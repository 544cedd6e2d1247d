# stdlib imports
import logging
import sqlite3

# vendor imports
import click

# local imports
import clan_banner_creator
from clan_banner_creator.imaging import DEFAULT_QUALITY


logger = logging.getLogger('clan_banner_creator')

# Constants
UINT32 = click.IntRange(0, 4294967295)


@click.command()
@click.option('--database', required=True, type=click.Path(dir_okay=False),
              help='Path to the clan banner SQLite database.')
@click.option('--save-as', 'saveAs', required=True,
              type=click.Path(dir_okay=False),
              help='Where to write the banner PNG.')
@click.option('--decal-id', 'decalId', required=True, type=UINT32)
@click.option('--decal-color-id', 'decalColorId', required=True, type=UINT32)
@click.option('--decal-background-color-id', 'decalBackgroundColorId',
              required=True, type=UINT32)
@click.option('--gonfalon-id', 'gonfalonId', required=True, type=UINT32)
@click.option('--gonfalon-color-id', 'gonfalonColorId', required=True,
              type=UINT32)
@click.option('--gonfalon-detail-id', 'gonfalonDetailId', required=True,
              type=UINT32)
@click.option('--gonfalon-detail-color-id', 'gonfalonDetailColorId',
              required=True, type=UINT32)
@click.option('--root', default=None,
              help='Content host to fetch art from.')
@click.option('--timeout', default=None, envvar='BANNER_TIMEOUT',
              type=click.FloatRange(min=0, min_open=True),
              help='Network and database timeout in seconds.')
@click.option('-v', '--verbose', is_flag=True, help='Enable debug logging.')
def cli(database, saveAs, root, timeout, verbose, **ids):
    """Build a Destiny 2 clan banner and save it as a PNG."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    # Make sure the database is usable before any work starts
    manifest = clan_banner_creator.Manifest(database)
    if timeout is not None:
        manifest.timeout = timeout
    try:
        manifest.open()
    except sqlite3.Error as e:
        raise click.ClickException(
            f'Unable to create a connection to the SQLite database {database}.'
        ) from e

    host = clan_banner_creator.ContentHost(root=root, timeout=timeout)

    with manifest:
        try:
            banner = clan_banner_creator.buildBanner(
                manifest,
                host,
                clan_banner_creator.BannerIds(**ids),
            )
            clan_banner_creator.save(banner, saveAs, quality=DEFAULT_QUALITY)
        except Exception as e:
            logger.debug('Banner build failed', exc_info=True)
            raise click.ClickException(
                f'An exception has occurred: {e}'
            ) from e


if __name__ == '__main__':
    cli()
