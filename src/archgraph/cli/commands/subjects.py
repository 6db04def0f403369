"""
Subjects Command - List subjects with an imported graph.
"""

import click

from ...core.exceptions import ArchgraphError
from ...store import SQLiteRecordStore
from ..utils import CliContext, echo_error, echo_warning, open_store


@click.command()
@click.pass_obj
def subjects(ctx: CliContext):
    """List subjects stored in the local database."""
    try:
        with open_store(ctx) as store:
            if not isinstance(store, SQLiteRecordStore):
                echo_error("Listing subjects requires the sqlite store backend")
                raise SystemExit(1)
            names = store.list_subjects()
    except ArchgraphError as e:
        echo_error(str(e))
        raise SystemExit(1)

    if not names:
        echo_warning("No subjects imported yet")
        return
    for name in names:
        click.echo(name)
