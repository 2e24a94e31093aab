"""
Object plumbing commands: hash-object, cat-file and ls-objects.

Default output is plain text or JSONL; --pretty renders a table.
"""

import logging

import click

from ..cli_utils import output_jsonl, standard_command
from ..domain.object import ObjectKind
from ..exceptions import CorruptObject
from ..object_store import ObjectStore, hash_object
from ..render import render_objects_table
from ..repository import Repository

logger = logging.getLogger(__name__)

KIND_CHOICES = [kind.value for kind in ObjectKind]


@click.command(name='hash-object')
@click.argument('file', type=click.File('rb'))
@click.option('-t', '--type', 'kind', type=click.Choice(KIND_CHOICES), default='blob',
              show_default=True, help='Object kind')
@click.option('-w', '--write', is_flag=True, help='Store the object in the repository')
@standard_command
def hash_object_handler(file, kind, write):
    """Compute the object hash of FILE, optionally storing it.

    Use - to read from standard input.
    """
    data = file.read()
    repo = Repository.find('.') if write else None
    click.echo(hash_object(data, ObjectKind.parse(kind), repo).to_hex())


@click.command(name='cat-file')
@click.argument('object_hash', metavar='HASH')
@click.option('-t', 'show', flag_value='type', help='Show the object kind')
@click.option('-s', 'show', flag_value='size', help='Show the object size')
@click.option('-p', 'show', flag_value='content', help='Print the object content')
@standard_command
def cat_file_handler(object_hash, show):
    """Show the kind, size or content of a stored object."""
    if not show:
        raise click.UsageError("one of -t, -s or -p is required")

    obj = ObjectStore(Repository.find('.')).read(object_hash)
    if show == 'type':
        click.echo(obj.kind.value)
    elif show == 'size':
        click.echo(obj.size)
    else:
        click.echo(obj.data, nl=False)


@click.command(name='ls-objects')
@click.option('--pretty', is_flag=True, help='Display as a formatted table instead of JSONL')
@standard_command
def ls_objects_handler(pretty):
    """List loose objects with their kind and size.

    Corrupt objects are listed with an error instead of a kind and size.
    """
    store = ObjectStore(Repository.find('.'))
    objects = _describe_objects(store)

    if pretty:
        render_objects_table(list(objects))
    else:
        output_jsonl(objects)


def _describe_objects(store):
    for object_hash in store:
        try:
            yield store.read(object_hash).to_dict()
        except CorruptObject as e:
            logger.warning(f"Corrupt object {object_hash}: {e}")
            yield {'hash': object_hash.to_hex(), 'error': str(e)}
