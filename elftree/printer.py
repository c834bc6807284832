import os

import click

from elftree.core.builder import DependencyGraph
from elftree.core.model import LibraryNode


def print_tree(graph: DependencyGraph, show_path: bool = False, verbose: bool = False, file=None) -> None:
    """Writes the dependency tree as indented plain text."""

    def rec(node: LibraryNode):
        indent = "   " * node.depth
        if show_path:
            click.echo(f"{indent}{node.name}  => {graph.libraries[node.name].path}", file=file)
        else:
            click.echo(f"{indent}{node.name}", file=file)

        for child in node.children:
            rec(child)

    rec(graph.root)

    if verbose:
        print_summary(graph, file=file)


def print_summary(graph: DependencyGraph, file=None) -> None:
    info = graph.libraries[graph.root.name]

    click.echo(file=file)
    click.echo(f"{os.path.basename(info.path)}: {info.path}", file=file)
    click.echo(
        f"  type:                     {info.object_type}  "
        f"({info.machine} / {info.elf_class} / {info.byte_order})",
        file=file,
    )
    click.echo(f"  interpreter:              {info.interpreter or '-'}", file=file)
    # the root itself is not a dependency
    click.echo(f"  total dependency:         {len(graph.libraries) - 1}", file=file)
    click.echo(f"  direct dependency:        {len(info.needed)}", file=file)
