import os
import unittest
from unittest.mock import MagicMock

from elftree.core.builder import build_dependency_graph
from elftree.core.errors import MissingSection, UnresolvedLibrary
from elftree.core.model import LibraryMetadata


def make_info(path, needed=()):
    return LibraryMetadata(
        path=path,
        machine="EM_X86_64",
        elf_class="ELFCLASS64",
        byte_order="ELFDATA2LSB",
        object_type="ET_DYN",
        os_abi="ELFOSABI_SYSV",
        abi_version=0,
        needed=list(needed),
    )


class FakeReader:
    def __init__(self, needed):
        self.needed = needed
        self.calls = []

    def __call__(self, name, path):
        self.calls.append(name)
        return make_info(path, self.needed.get(name, []))


class TestDependencyGraphBuilder(unittest.TestCase):

    def setUp(self):
        self.resolver = MagicMock()
        self.resolver.resolve.side_effect = lambda name, requester: f"/fake/{name}"

    def test_diamond_dependency(self):
        reader = FakeReader({"A": ["B", "C"], "B": ["D"], "C": ["D"]})

        graph = build_dependency_graph("/fake/A", self.resolver, reader)

        root = graph.root
        self.assertEqual(root.name, "A")
        self.assertEqual([c.name for c in root.children], ["B", "C"])
        self.assertEqual([c.name for c in root.children[0].children], ["D"])
        self.assertEqual([c.name for c in root.children[1].children], ["D"])
        self.assertEqual(sorted(graph.libraries), ["A", "B", "C", "D"])
        self.assertEqual(graph.node_count(), 5)
        self.assertEqual(reader.calls.count("D"), 1)

    def test_children_are_processed_before_pending_siblings(self):
        reader = FakeReader({"A": ["B", "C"], "B": ["C"], "C": ["D"]})

        graph = build_dependency_graph("/fake/A", self.resolver, reader)

        self.assertEqual(reader.calls, ["A", "B", "C", "D"])

        b, c = graph.root.children
        self.assertEqual(b.children[0].name, "C")
        self.assertEqual(b.children[0].depth, 2)
        self.assertEqual([n.name for n in b.children[0].children], ["D"])
        self.assertEqual(c.children, [])

        # C was resolved on behalf of B, its first occurrence
        first_c = self.resolver.resolve.call_args_list[1]
        self.assertEqual(first_c.args[0], "C")
        self.assertEqual(first_c.args[1].path, "/fake/B")

    def test_depth_and_parent_links(self):
        reader = FakeReader({"A": ["B"], "B": ["C"]})

        graph = build_dependency_graph("/fake/A", self.resolver, reader)

        c = graph.root.children[0].children[0]
        self.assertEqual(c.depth, 2)
        self.assertEqual(c.lineage(), ["A", "B", "C"])
        self.assertIsNone(graph.root.parent)

    def test_root_uses_given_path(self):
        reader = FakeReader({})

        graph = build_dependency_graph("/fake/bin/../bin/app", self.resolver, reader)

        self.assertEqual(graph.root.name, "app")
        self.assertEqual(graph.libraries["app"].path, os.path.realpath("/fake/bin/app"))
        self.resolver.resolve.assert_not_called()

    def test_unresolved_library_aborts(self):
        self.resolver.resolve.side_effect = lambda name, requester: "" if name == "C" else f"/fake/{name}"
        reader = FakeReader({"A": ["B"], "B": ["C"]})

        with self.assertRaises(UnresolvedLibrary) as ctx:
            build_dependency_graph("/fake/A", self.resolver, reader)

        self.assertEqual(ctx.exception.name, "C")
        self.assertIn("needed by B", str(ctx.exception))

    def test_failure_at_any_depth_aborts(self):
        def reader(name, path):
            if name == "D":
                raise MissingSection(name, path)
            return make_info(path, {"A": ["B"], "B": ["D"]}.get(name, []))

        with self.assertRaises(MissingSection):
            build_dependency_graph("/fake/A", self.resolver, reader)


if __name__ == "__main__":
    unittest.main()
