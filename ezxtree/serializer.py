"""Turning an element tree back into XML text."""

from __future__ import annotations

from typing import Iterable, Mapping, Optional, Sequence

from .element import DefaultAttr, Element

_TEXT_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    "\r": "&#xD;",
}

_ATTR_ESCAPES = {
    **_TEXT_ESCAPES,
    '"': "&quot;",
    "\n": "&#xA;",
    "\t": "&#x9;",
}


def amp_encode(text: str, attribute: bool = False) -> str:
    """Escape markup characters; attribute values also escape quotes and tabs/newlines.

    Encoding stops at the first NUL character.
    """
    table = _ATTR_ESCAPES if attribute else _TEXT_ESCAPES
    text = text.split("\0", 1)[0]
    return "".join(table.get(ch, ch) for ch in text)


def _write_content(
    txt: str,
    children: Iterable[Element],
    out: list[str],
    defaults: Mapping[str, Sequence[DefaultAttr]],
) -> None:
    start = 0
    for child in children:
        piece = txt[start:child.off] if child.off >= start else txt[start:]
        out.append(amp_encode(piece))
        _write_element(child, out, defaults)
        start = min(child.off, len(txt))
    out.append(amp_encode(txt[start:]))


def _write_element(
    element: Element,
    out: list[str],
    defaults: Mapping[str, Sequence[DefaultAttr]],
) -> None:
    out.append(f"<{element.name}")
    for name, value in element.attrs.items():
        out.append(f' {name}="{amp_encode(value, True)}"')

    seen: set[str] = set()
    for default in defaults.get(element.name, ()):
        if default.name in seen:
            continue
        seen.add(default.name)
        if default.value is None or default.name in element.attrs:
            continue
        out.append(f' {default.name}="{amp_encode(default.value, True)}"')
    out.append(">")

    if element.child_head is not None:
        _write_content(element.txt, element.children(), out, defaults)
    else:
        out.append(amp_encode(element.txt))
    out.append(f"</{element.name}>")


def to_xml(element: Optional[Element]) -> str:
    """Serialise a tag and its sub tags.

    For a root tag, processing instructions that came before the root are
    written first and those that came after it are written last.
    """
    if element is None or element.name is None:
        return ""
    doc = element.root().document
    defaults = doc.default_attrs if doc is not None else {}
    is_root = element.parent is None

    out: list[str] = []
    if is_root and doc is not None:
        for target, items in doc.instructions.items():
            for inst in items:
                if inst.after_root:
                    continue
                sep = " " if inst.text else ""
                out.append(f"<?{target}{sep}{inst.text}?>\n")

    _write_element(element, out, defaults)

    if is_root and doc is not None:
        for target, items in doc.instructions.items():
            for inst in items:
                if not inst.after_root:
                    continue
                sep = " " if inst.text else ""
                out.append(f"\n<?{target}{sep}{inst.text}?>")
    return "".join(out)