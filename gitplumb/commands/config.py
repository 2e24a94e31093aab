import click
import json

from ..cli_utils import standard_command
from ..config import resolve_settings
from ..exceptions import NoRepository
from ..render import render_settings
from ..repository import Repository


@click.group("config")
def config_cmd():
    """Configuration commands."""
    pass


@config_cmd.command("show")
@click.option("--pretty", is_flag=True, help="Display as a table instead of single-line JSON")
@standard_command
def show_config(pretty):
    """Show the effective settings with all layers applied.

    Inside a repository this includes its config file; elsewhere only
    the defaults and GITPLUMB_* environment overrides apply.
    """
    try:
        settings = Repository.find('.').settings
    except NoRepository:
        settings = resolve_settings()

    if pretty:
        render_settings(settings.to_dict())
    else:
        print(json.dumps(settings.to_dict(), ensure_ascii=False))
