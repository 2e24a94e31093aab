#!/usr/bin/env python3

import click

from gitplumb.cli_utils import configure_logging
from gitplumb.commands.init import init_handler
from gitplumb.commands.objects import cat_file_handler, hash_object_handler, ls_objects_handler
from gitplumb.commands.config import config_cmd


@click.group()
@click.version_option(package_name='gitplumb')
@click.option('-v', '--verbose', is_flag=True, help='Log debug output to stderr')
def cli(verbose):
    """gitplumb - Content-addressable object store with git's loose object format.

    Initializes repositories and reads and writes zlib-compressed,
    SHA-1 addressed objects under .git/objects.
    """
    configure_logging(verbose)


cli.add_command(init_handler)
cli.add_command(hash_object_handler)
cli.add_command(cat_file_handler)
cli.add_command(ls_objects_handler)
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
