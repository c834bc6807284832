import unittest

from elftree.core.model import LibraryNode
from elftree.views.navigator import TextRow, TreeItem, Viewport, ViewportState, make_dependency_items


def diamond():
    a = LibraryNode("A")
    b = a.add_child("B")
    c = a.add_child("C")
    b.add_child("D")
    c.add_child("D")
    return a


def flat(count):
    root = LibraryNode("root")
    for i in range(1, count):
        root.add_child(f"lib{i}")
    return root


def nested():
    # A -> {B -> {D -> {F}, E}, C -> {G}}
    a = LibraryNode("A")
    b = a.add_child("B")
    c = a.add_child("C")
    d = b.add_child("D")
    b.add_child("E")
    d.add_child("F")
    c.add_child("G")
    return a


def visible_rows(root):
    rows = []
    item = root
    while item is not None:
        rows.append(item)
        item = item.next_item()
    return rows


def names(items):
    return [i.content.node.name for i in items]


def find(root, name):
    for item in visible_rows(root):
        if item.content.node.name == name:
            return item
    raise KeyError(name)


class TestTreeItem(unittest.TestCase):

    def test_expanded_totals(self):
        root = make_dependency_items(diamond())

        self.assertEqual(root.total, 4)
        self.assertEqual(names(visible_rows(root)), ["A", "B", "D", "C", "D"])

    def test_fold_and_expand_update_ancestors(self):
        root = make_dependency_items(nested())
        b = find(root, "B")

        b.toggle()
        self.assertTrue(b.folded)
        self.assertEqual(b.total, 0)
        self.assertEqual(root.total, 3)
        self.assertEqual(names(visible_rows(root)), ["A", "B", "C", "G"])

        b.toggle()
        self.assertEqual(b.total, 3)
        self.assertEqual(root.total, 6)

    def test_double_toggle_restores_total(self):
        root = make_dependency_items(nested())

        for item in visible_rows(root):
            if item.child is None:
                continue
            before = root.total
            item.toggle()
            item.toggle()
            self.assertEqual(root.total, before)

    def test_toggle_leaf_is_noop(self):
        root = make_dependency_items(nested())
        f = find(root, "F")

        f.toggle()

        self.assertFalse(f.folded)
        self.assertEqual(root.total, 6)

    def test_fold_under_folded_ancestor(self):
        root = make_dependency_items(nested())
        b = find(root, "B")
        d = find(root, "D")

        b.fold()
        d.fold()
        self.assertEqual(b.total, 0)
        self.assertEqual(root.total, 3)

        b.expand()
        self.assertEqual(b.total, 2)
        self.assertEqual(root.total, 5)
        self.assertEqual(names(visible_rows(root)), ["A", "B", "D", "E", "C", "G"])

    def test_next_prev_are_inverse(self):
        root = make_dependency_items(nested())
        find(root, "D").fold()

        rows = visible_rows(root)
        for item in rows[:-1]:
            self.assertIs(item.next_item().prev_item(), item)
        for item in rows[1:]:
            self.assertIs(item.prev_item().next_item(), item)

        self.assertIsNone(rows[-1].next_item())
        self.assertIsNone(root.prev_item())

    def test_append_counts_children(self):
        root = TreeItem(TextRow("root"))
        group = TreeItem(TextRow("group"))
        group.append(TreeItem(TextRow("one")))
        group.append(TreeItem(TextRow("two")))
        root.append(group)
        group.append(TreeItem(TextRow("three")))

        self.assertEqual(group.total, 3)
        self.assertEqual(root.total, 4)
        self.assertEqual([c.content.text for c in group.children()], ["one", "two", "three"])


class TestViewport(unittest.TestCase):

    def setUp(self):
        self.root = make_dependency_items(flat(100))
        self.vp = Viewport(self.root, rows=20)

    def assertRow(self, index):
        self.assertEqual(self.vp.idx, index)
        expected = "root" if index == 0 else f"lib{index}"
        self.assertEqual(self.vp.curr.content.node.name, expected)

    def assertInvariant(self):
        vp = self.vp
        self.assertTrue(0 <= vp.off <= vp.idx < vp.off + vp.rows)
        self.assertTrue(vp.idx <= self.root.total)

    def test_page_down_twice(self):
        self.vp.page_down()
        self.assertRow(19)
        self.assertEqual(self.vp.off, 0)

        self.vp.page_down()
        self.assertRow(39)
        self.assertEqual(self.vp.off, 20)
        self.assertEqual(self.vp.top.content.node.name, "lib20")
        self.assertInvariant()

    def test_page_down_stops_at_last_row(self):
        for _ in range(10):
            self.vp.page_down()

        self.assertRow(99)
        self.assertEqual(self.vp.off, 80)
        self.assertInvariant()

    def test_page_up(self):
        for _ in range(3):
            self.vp.page_down()
        self.assertRow(59)

        self.vp.page_up()
        self.assertRow(40)
        self.assertEqual(self.vp.off, 40)

        self.vp.page_up()
        self.assertRow(20)
        self.assertEqual(self.vp.off, 20)
        self.assertIs(self.vp.top, self.vp.curr)
        self.assertInvariant()

    def test_step_down_scrolls(self):
        for _ in range(25):
            self.vp.down()

        self.assertRow(25)
        self.assertEqual(self.vp.off, 6)
        self.assertEqual(self.vp.top.content.node.name, "lib6")

        for _ in range(25):
            self.vp.up()
        self.assertRow(0)
        self.assertEqual(self.vp.off, 0)
        self.assertInvariant()

    def test_step_past_bounds(self):
        self.vp.up()
        self.assertRow(0)

        self.vp.end()
        self.vp.down()
        self.assertRow(99)
        self.assertInvariant()

    def test_end_and_home(self):
        self.vp.end()
        self.assertRow(99)
        self.assertEqual(self.vp.off, 80)
        self.assertEqual(self.vp.top.content.node.name, "lib80")

        self.vp.home()
        self.assertRow(0)
        self.assertIs(self.vp.top, self.root)

    def test_end_on_short_tree(self):
        vp = Viewport(make_dependency_items(diamond()), rows=20)

        vp.end()

        self.assertEqual(vp.idx, 4)
        self.assertEqual(vp.off, 0)
        self.assertIs(vp.top, vp.root)

    def test_horizontal_offset_clamped(self):
        self.vp.right(3)
        self.vp.left(1)
        self.assertEqual(self.vp.pos, 2)

        self.vp.left(5)
        self.assertEqual(self.vp.pos, 0)

    def test_paint(self):
        self.vp.down()
        self.vp.right(1)

        rows = self.vp.paint(width=12, height=3)

        self.assertEqual(len(rows), 3)
        self.assertTrue(all(len(r.text) == 12 for r in rows))
        self.assertEqual(rows[0].text, " root".ljust(12))
        self.assertEqual(rows[1].text, "  - lib1".ljust(12))
        self.assertFalse(rows[0].selected)
        self.assertTrue(rows[1].selected)

    def test_paint_pads_short_tree(self):
        vp = Viewport(make_dependency_items(diamond()), rows=10)
        vp.curr.toggle()

        rows = vp.paint(width=5, height=4)

        self.assertEqual(rows[0].text, "+ A  ")
        self.assertEqual([r.text for r in rows[1:]], ["     "] * 3)

    def test_restore_state(self):
        self.vp.restore(ViewportState(selected=45, first=30, offset=4))

        self.assertRow(45)
        self.assertEqual(self.vp.off, 30)
        self.assertEqual(self.vp.top.content.node.name, "lib30")
        self.assertEqual(self.vp.pos, 4)

    def test_resize_keeps_cursor_visible(self):
        for _ in range(15):
            self.vp.down()

        self.vp.resize(5)

        self.assertRow(15)
        self.assertEqual(self.vp.off, 11)
        self.assertEqual(self.vp.top.content.node.name, "lib11")
        self.assertInvariant()

    def test_toggle_changes_scroll_range(self):
        vp = Viewport(make_dependency_items(nested()), rows=3)
        vp.down()
        vp.toggle()

        vp.end()

        self.assertEqual(vp.idx, 3)
        self.assertEqual(vp.curr.content.node.name, "G")


if __name__ == "__main__":
    unittest.main()
