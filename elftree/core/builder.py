import logging
import os
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque, Dict

from elftree.core.errors import UnresolvedLibrary
from elftree.core.model import LibraryMetadata, LibraryNode
from elftree.core.reader import read_library
from elftree.core.resolver import LibraryResolver

LibraryReader = Callable[[str, str], LibraryMetadata]


@dataclass
class DependencyGraph:
    root: LibraryNode
    # One entry per unique library name, root included
    libraries: Dict[str, LibraryMetadata] = field(default_factory=dict)

    def node_count(self) -> int:
        return self.root.count()


class AnalysisContext:
    """State of one analysis run: the resolver and the name-indexed metadata table."""

    def __init__(self, resolver: LibraryResolver, reader: LibraryReader = read_library) -> None:
        self.resolver = resolver
        self.reader = reader
        self.libraries: Dict[str, LibraryMetadata] = {}

    def locate(self, node: LibraryNode, target: str) -> str:
        if node.parent is None:
            return os.path.realpath(target)

        requester = self.libraries[node.parent.name]
        found = self.resolver.resolve(node.name, requester)
        if not found:
            raise UnresolvedLibrary(node.name, "", f"needed by {node.parent.name}")
        return os.path.realpath(found)

    def process(self, node: LibraryNode, target: str) -> Deque[LibraryNode]:
        """Reads one library and returns its freshly created child nodes."""
        path = self.locate(node, target)
        logging.debug(f"Processing {node.name} ({path}) at depth {node.depth}")

        info = self.reader(node.name, path)
        self.libraries[node.name] = info

        return deque(node.add_child(soname) for soname in info.needed)


def build_dependency_graph(
    target: str,
    resolver: LibraryResolver,
    reader: LibraryReader = read_library,
) -> DependencyGraph:
    """
    Walks the needed libraries of `target` and every library they need in turn.

    New children are pushed in front of the pending work, so the walk is
    neither breadth- nor depth-first. Any failure aborts the whole build.
    """
    context = AnalysisContext(resolver, reader)
    root = LibraryNode(os.path.basename(target))

    worklist = deque([root])
    while worklist:
        node = worklist.popleft()

        # Repeated names stay leaves; the first occurrence owns the subtree
        if node.name in context.libraries:
            continue

        children = context.process(node, target)
        worklist.extendleft(reversed(children))

    graph = DependencyGraph(root, context.libraries)
    logging.info(
        f"Built dependency tree of {root.name}: "
        f"{len(graph.libraries)} libraries, {graph.node_count()} nodes"
    )
    return graph
