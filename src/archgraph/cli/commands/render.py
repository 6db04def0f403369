"""
Render Command - Export a subject's graph as a standalone HTML page.
"""

from pathlib import Path
from typing import Optional

import click

from ...core.exceptions import ArchgraphError
from ...graph.highlight import highlight
from ...graph.layout import layout_graph
from ...graph.visualize import export_html
from ..utils import CliContext, echo_error, echo_info, echo_success, echo_warning, load_subject_graph, open_store


@click.command()
@click.argument("subject")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path),
              default=None, help="Output file (default: <subject>.html)")
@click.option("-s", "--select", "selected", default=None, help="Component id to highlight")
@click.option("--open", "open_browser", is_flag=True, help="Open the page in a browser")
@click.pass_obj
def render(ctx: CliContext, subject: str, output: Optional[Path], selected: Optional[str], open_browser: bool):
    """
    Render SUBJECT's tiered graph to HTML.
    """
    try:
        with open_store(ctx) as store:
            graph, _ = load_subject_graph(store, subject)
    except ArchgraphError as e:
        echo_error(f"Could not load graph for {subject}: {e}")
        raise SystemExit(1)

    state = highlight(graph, selected)
    if selected and state.selected_id is None:
        echo_warning(f"Component not found: {selected}; rendering without selection")

    output_path = output or Path(f"{subject}.html")
    export_html(subject, layout_graph(graph, ctx.config.layout), state, output_path, open_browser)
    echo_success(f"Generated: {output_path}")
    echo_info(f"Open: file://{output_path.absolute()}")
