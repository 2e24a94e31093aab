"""
Handles the 'init' command for creating a repository.
"""

import click

from ..cli_utils import standard_command
from ..repository import Repository


@click.command(name='init')
@click.argument('path', default='.', required=False, type=click.Path(file_okay=False))
@standard_command
def init_handler(path):
    """Create an empty repository.

    PATH: Working tree to initialize (default: current directory)

    \b
    Examples:
        gitplumb init
        gitplumb init ~/projects/new-repo
    """
    repo = Repository.initialize(path)
    click.echo(f"Initialized empty repository in {repo.gitdir}")
