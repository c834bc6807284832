import logging
import sys

import click

from elftree.__version__ import __version__
from elftree.core.builder import build_dependency_graph
from elftree.core.config import SearchConfig
from elftree.core.errors import ElfTreeError
from elftree.core.resolver import LibraryResolver
from elftree.printer import print_tree

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def configure_logging(log_file=None):
    if log_file:
        logging.basicConfig(filename=log_file, level=logging.DEBUG, filemode="w", format=LOG_FORMAT)
    else:
        # stderr carries only the diagnostic line
        logging.basicConfig(handlers=[logging.NullHandler()])


@click.command("elftree")
@click.argument("path", type=click.Path())
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show binary info.")
@click.option("-p", "--show-path", is_flag=True, default=False, help="Show library path.")
@click.option("--tui/--stdio", default=True, help="Interactive view or plain text on standard output.")
@click.option("--ld-so-conf", type=click.Path(dir_okay=False), default=None,
              help="Library cache configuration (default: /etc/ld.so.conf).")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Write debug logs here.")
@click.version_option(__version__, prog_name="elftree")
def cli(path, verbose, show_path, tui, ld_so_conf, log_file):
    """Tree viewer for the shared library dependencies of an ELF binary."""
    configure_logging(log_file)

    resolver = LibraryResolver(SearchConfig.from_environment(ld_so_conf=ld_so_conf))
    try:
        graph = build_dependency_graph(path, resolver)
    except ElfTreeError as e:
        logging.error(f"Build failed: {e}")
        click.echo(f"elftree: {e}", err=True)
        sys.exit(1)

    if not tui:
        print_tree(graph, show_path=show_path, verbose=verbose)
        return

    from elftree.app import ElfTreeApp
    from elftree.views.coordinator import ViewCoordinator

    app = ElfTreeApp(ViewCoordinator(graph, show_path=show_path))
    app.run()


def main():
    """ Entrypoint when is installed via pip """
    cli()


# Development mode
if __name__ == "__main__":
    main()
