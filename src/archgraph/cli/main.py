"""
archgraph CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

import logging
from pathlib import Path

import click

from .commands import flows, highlight, importer, layout, render, subjects
from .utils import CliContext


@click.group()
@click.version_option(package_name="archgraph")
@click.option("-c", "--config", "config_path", type=click.Path(path_type=Path),
              help="Config file (default: .archgraph/config.yaml)")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_path: Path, verbose: bool):
    """archgraph: Tiered architecture graphs and hand-authored flows.

    \b
    Quick Start:
      archgraph import shop-api graph.json
      archgraph layout shop-api
      archgraph highlight shop-api OrderService
      archgraph render shop-api --output shop-api.html
      archgraph flows list shop-api
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="[%X]",
    )
    ctx.obj = CliContext(config_path=config_path)


main.add_command(importer.import_graph)
main.add_command(layout.layout)
main.add_command(highlight.highlight)
main.add_command(render.render)
main.add_command(flows.flows)
main.add_command(subjects.subjects)

if __name__ == "__main__":
    main()
