import random

import pytest

from ezxtree.element import (
    DEFAULT_ENTITIES,
    DefaultAttr,
    Document,
    Element,
    Instruction,
    new,
)


def names(element):
    return [c.name for c in element.children()]


def same_name_chain(parent, name):
    out = []
    cur = parent.child(name)
    while cur is not None:
        out.append(cur)
        cur = cur.next
    return out


def sibling_chain(parent):
    out = []
    cur = parent.child_head
    while cur is not None:
        out.append(cur.name)
        cur = cur.sibling
    return out


@pytest.fixture
def library():
    lib = new("library")
    for s in range(2):
        shelf = lib.add_child("shelf", s)
        for b in range(3):
            book = shelf.add_child("book", b)
            book.add_child("title", 0).set_txt(f"title-{s}-{b}")
    return lib


def test_new_document_has_default_entities():
    root = new("r")
    assert root.document.entities == DEFAULT_ENTITIES
    assert root.document.entities["lt;"] == "&#60;"
    assert root.document.entities["amp;"] == "&#38;"
    assert root.error() == ""


def test_documents_do_not_share_entities():
    a = new("a")
    b = new("b")
    a.document.entities["x;"] = "y"
    assert "x;" not in b.document.entities


def test_children_sorted_by_offset():
    root = new("r")
    root.add_child("b", 5)
    root.add_child("a", 2)
    root.add_child("b", 1)
    assert [c.off for c in root.children()] == [1, 2, 5]
    assert names(root) == ["b", "a", "b"]
    assert [c.off for c in same_name_chain(root, "b")] == [1, 5]
    assert sibling_chain(root) == ["b", "a"]


def test_equal_offsets_keep_insertion_order():
    root = new("r")
    first = root.add_child("x", 0)
    second = root.add_child("y", 0)
    third = root.add_child("x", 0)
    assert list(root.children()) == [first, second, third]
    assert first.next is third


def test_child_missing_returns_none():
    root = new("r")
    root.add_child("a", 0)
    assert root.child("z") is None


def test_idx():
    root = new("r")
    items = [root.add_child("i", n) for n in range(3)]
    assert items[0].idx(0) is items[0]
    assert items[0].idx(2) is items[2]
    assert items[0].idx(3) is None
    assert items[0].idx(-1) is None


def test_get_path(library):
    title = library.get("shelf", 1, "book", 2, "title", -1)
    assert title.txt == "title-1-2"


def test_get_terminated_by_empty_name(library):
    shelf = library.get("shelf", 1, "")
    assert shelf is library.child("shelf").next


def test_get_missing_and_empty(library):
    assert library.get("shelf", 5, "book", -1) is None
    assert library.get("nothing", 0, "book", -1) is None
    assert library.get() is library


def test_parent_and_root(library):
    title = library.get("shelf", 0, "book", 1, "title", -1)
    assert title.parent.parent.parent is library
    assert title.root() is library


def test_set_attr_add_replace_remove():
    el = new("r").add_child("e", 0)
    assert el.set_attr("a", "1") is el
    el.set_attr("b", "2")
    el.set_attr("a", "3")
    assert list(el.attrs.items()) == [("a", "3"), ("b", "2")]
    el.set_attr("a", None)
    assert el.attr("a") is None
    assert el.attr("b") == "2"
    el.set_attr("missing", None)
    assert list(el.attrs) == ["b"]


def test_default_attributes_from_document():
    root = new("r")
    root.document.default_attrs["book"] = [
        DefaultAttr("lang", "en", " "),
        DefaultAttr("id", None, "*"),
    ]
    book = root.add_child("book", 0)
    other = root.add_child("other", 0)
    assert book.attr("lang") == "en"
    assert book.attr("id") is None
    assert other.attr("lang") is None
    book.set_attr("lang", "fr")
    assert book.attr("lang") == "fr"


def test_pi_lookup():
    root = new("r")
    root.document.instructions["php"] = [
        Instruction("echo 1;", False),
        Instruction("echo 2;", True),
    ]
    leaf = root.add_child("a", 0)
    assert leaf.pi("php") == ["echo 1;", "echo 2;"]
    assert leaf.pi("none") == []
    assert Element("loose").pi("php") == []


def test_error_from_root():
    root = new("r")
    leaf = root.add_child("a", 0).add_child("b", 0)
    root.document.error = "[error near line 1]: missing >"
    assert leaf.error() == "[error near line 1]: missing >"
    leaf.cut()
    assert leaf.error() == ""


def test_set_txt():
    el = new("r")
    assert el.set_txt("hello") is el
    assert el.txt == "hello"


def test_cut_first_of_type_keeps_links():
    root = new("r")
    a1 = root.add_child("a", 0)
    b = root.add_child("b", 1)
    a2 = root.add_child("a", 2)
    assert a1.cut() is a1
    assert list(root.children()) == [b, a2]
    assert root.child("a") is a2
    assert root.child("b") is b
    assert a1.parent is None
    assert a1.next is None and a1.ordered is None


def test_cut_middle_of_type():
    root = new("r")
    items = [root.add_child("a", n) for n in range(3)]
    items[1].cut()
    assert same_name_chain(root, "a") == [items[0], items[2]]


def test_cut_keeps_subtree():
    root = new("r")
    branch = root.add_child("branch", 0)
    leaf = branch.add_child("leaf", 0)
    branch.cut()
    assert branch.child("leaf") is leaf
    assert root.child("branch") is None


def test_move_to_other_parent():
    root = new("r")
    src = root.add_child("src", 0)
    dst = root.add_child("dst", 1)
    item = src.add_child("item", 0)
    dst.add_child("x", 4)
    assert item.move(dst, 2) is item
    assert src.child("item") is None
    assert item.parent is dst
    assert item.off == 2
    assert names(dst) == ["item", "x"]


def test_remove():
    root = new("r")
    a = root.add_child("a", 0)
    b = root.add_child("b", 0)
    a.remove()
    assert list(root.children()) == [b]
    assert root.child("a") is None


def test_insert_detached_element():
    root = new("r")
    root.add_child("a", 3)
    loose = Element("a")
    loose.insert(root, 1)
    assert root.child("a") is loose
    assert loose.parent is root


@pytest.mark.parametrize("seed", range(5))
def test_links_consistent_after_random_edits(seed):
    rng = random.Random(seed)
    root = new("r")
    live = []
    for _ in range(60):
        if live and rng.random() < 0.3:
            victim = live.pop(rng.randrange(len(live)))
            victim.cut()
        else:
            live.append(root.add_child(rng.choice("abc"), rng.randrange(10)))
    ordered = list(root.children())
    assert sorted(ordered, key=id) == sorted(live, key=id)
    assert [c.off for c in ordered] == sorted(c.off for c in ordered)
    for name in "abc":
        expected = [c for c in ordered if c.name == name]
        assert same_name_chain(root, name) == expected
    seen = []
    for c in ordered:
        if c.name not in seen:
            seen.append(c.name)
    assert sibling_chain(root) == seen


def test_document_defaults():
    doc = Document()
    assert doc.standalone is False
    assert doc.default_attrs == {}
    assert doc.instructions == {}
    assert doc.entities["quot;"] == "&#34;"