# ezxtree

ezxtree is a small, forgiving XML parser. It builds a lightweight element
tree and can write that tree back out as XML. It does the following:

- decodes character references and entity references;
- normalises line endings;
- handles CDATA sections, comments and processing instructions;
- reads entity declarations and default attribute declarations from an
  internal DTD subset;
- accepts UTF-16 input that starts with a byte order mark.

The package has no third-party dependencies.

## Installing

    pip install .

To run the tests:

    pip install ".[test]"
    pytest

## Parsing

```python
from ezxtree.parser import parse_str, ParseError

library = parse_str(
    "<library><shelf><book><title>Dune</title></book></shelf></library>"
)
title = library.get("shelf", 0, "book", 0, "title", -1)
print(title.txt)          # Dune

try:
    parse_str("<a><b></a>")
except ParseError as exc:
    print(exc)            # [error near line 1]: unexpected closing tag </a>
    partial = exc.element # root of the tree built before the error
```

Other entry points in `ezxtree.parser`:

- `parse_bytes(data)` parses UTF-8 bytes, or UTF-16 bytes that start with a
  byte order mark.
- `parse_file(path)` reads a file and parses it.
- `parse_fp(fp)` reads a whole open stream and parses it. The stream may be
  binary or text.

When a parse fails, `ParseError` is raised. Its `message` gives the line
number near the fault. Its `element` holds the root of the partial tree, and
that root's `error()` returns the same message.

## Walking the tree

Each `Element` (in `ezxtree.element`) has these fields:

- `name` is the tag name.
- `attrs` is a dict of the attributes written on the tag.
- `txt` is the character content.
- `off` is the offset of the tag within its parent's content.

Each element also has these methods:

- `child(name)` returns the first sub tag with that name, or `None`.
- `idx(n)` follows the same-name list `n` steps; `idx(0)` returns the element
  itself.
- `get(*path)` takes alternating tag names and indexes. The path ends at a
  negative index, at an empty name, or at the end of the arguments.
- `children()` yields the sub tags in document order.
- `attr(name)` returns an attribute value. If the tag has no such attribute,
  it falls back to the defaults declared in the DTD, and returns `None` when
  there is no default either.
- `pi(target)` returns the processing instruction texts recorded for a
  target, as a list.
- `root()` returns the top of the tree.
- `error()` returns the parser error message of the tree, or `""` if there
  was none.

The data for the whole document lives in a `Document` attached to the root
element. It holds the entities, the default attributes, the processing
instructions, the `standalone` flag and the error.

## Building and editing

```python
from ezxtree.element import new
from ezxtree.serializer import to_xml

doc = new("note")
doc.add_child("to", 0).set_txt("Tove")
doc.set_attr("lang", "en")
print(to_xml(doc))        # <note lang="en"><to>Tove</to></note>
```

These methods change the tree:

- `add_child(name, off)` creates a sub tag at `off` characters into the
  parent's content.
- `set_txt(txt)` replaces the character content.
- `set_attr(name, value)` sets an attribute. A value of `None` removes the
  attribute.
- `cut()` detaches an element and its sub tags from the parent.
- `insert(dest, off)` places a detached element under `dest`.
- `move(dest, off)` cuts an element and then inserts it under `dest`.
- `remove()` takes an element out of the tree.

## Writing XML

`ezxtree.serializer.to_xml(element)` returns the element and its sub tags as
XML text. For each attribute, it writes either the value set on the tag or
the value declared as a default in the DTD. When it is given a root element,
it also does the following:

- writes the processing instructions that came before the root element ahead
  of the root element;
- writes the ones that came after the root element at the end.

`amp_encode(text, attribute=False)` escapes `&`, `<`, `>` and carriage
returns. For attribute values it also escapes `"`, newlines and tabs.

The lower-level helpers are in `ezxtree.entities`:

- `decode(text, entities, mode)` decodes references in text.
- `entity_ok(name, text, entities)` checks an entity for circular
  references.
- `utf16_to_utf8(data)` converts UTF-16 input to UTF-8.

## Command line

Parse a file and print it back as XML:

    ezxtree document.xml

If the parse fails, the command prints the partial tree, writes the error
message to standard error and exits with status 1. If it is given the wrong
number of arguments, it prints a usage line and exits with status 2.

Build a static HTML site from a bible XML file:

    ezxtree-bible-site kjv.xml bible

The file must use `BIBLEBOOK`, `CHAPTER` and `VERS` elements, with the
attributes `bname`, `bnumber`, `cnumber` and `vnumber`. The two arguments
default to `kjv.xml` and `bible`. The command writes these pages:

- a main `index.html`;
- one folder for each book, named after the book with spaces turned into
  underscores, each holding its own `index.html`;
- one `Chapter_N.html` page for each chapter.

The command appends to existing files, so building into the same folder
twice repeats the content. The same work is available from Python as
`ezxtree.bible_site.build_site(bible, out_dir)`.

## Limits

ezxtree is not a validating parser. It has these limits:

- It does not check documents against a DTD.
- It does not load external entities or external DTDs.
- It does not process namespaces.

Declarations in the internal subset serve only these purposes:

- defining entities;
- supplying default attribute values.