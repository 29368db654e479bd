"""Parsing XML text into an element tree."""

from __future__ import annotations

from typing import BinaryIO, Optional, TextIO, Union

from .element import DefaultAttr, Element, Instruction, new
from .entities import WHITESPACE, decode, entity_ok, utf16_to_utf8

_WS = "\t\r\n "
_ERROR_LIMIT = 127


class ParseError(Exception):
    """Raised when the input is not well formed.

    ``element`` holds the root of the tree built up to the error; its
    document records the same message.
    """

    def __init__(self, message: str, element: Element) -> None:
        super().__init__(message)
        self.message = message
        self.element = element


def _span(text: str, pos: int, chars: str) -> int:
    """Index of the first character at or after ``pos`` not in ``chars``."""
    n = len(text)
    while pos < n and text[pos] in chars:
        pos += 1
    return pos


def _cspan(text: str, pos: int, chars: str) -> int:
    """Index of the first character at or after ``pos`` in ``chars``, or len."""
    n = len(text)
    while pos < n and text[pos] not in chars:
        pos += 1
    return pos


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.root = new(None)
        self.doc = self.root.document
        self.cur: Optional[Element] = self.root

    def fail(self, pos: int, message: str) -> None:
        line = self.text.count("\n", 0, max(pos, 0)) + 1
        full = f"[error near line {line}]: {message}"[:_ERROR_LIMIT]
        self.doc.error = full
        raise ParseError(full, self.root)

    # tree building

    def open_tag(self, name: str, attrs: dict[str, str]) -> None:
        cur = self.cur
        if cur.name is not None:
            cur = cur.add_child(name, len(cur.txt))
        else:
            cur.name = name
        cur.attrs = attrs
        self.cur = cur

    def close_tag(self, name: str, pos: int) -> None:
        cur = self.cur
        if cur is None or cur.name is None or cur.name != name:
            self.fail(pos, f"unexpected closing tag </{name}>")
        self.cur = cur.parent

    def char_content(self, raw: str, mode: str) -> None:
        cur = self.cur
        if cur is None or cur.name is None or not raw:
            return
        cur.txt += decode(raw, self.doc.entities, mode)

    def proc_inst(self, raw: str) -> None:
        end = _cspan(raw, 0, _WS)
        target = raw[:end]
        rest = raw[_span(raw, end + 1, _WS):] if end < len(raw) else ""
        if target == "xml":
            pos = rest.find("standalone")
            if pos != -1 and rest.startswith("yes", _span(rest, pos + 10, _WS + "='\"")):
                self.doc.standalone = True
            return
        self.doc.instructions.setdefault(target, []).append(
            Instruction(rest, self.root.name is not None)
        )

    # internal DTD subset

    def internal_dtd(self, start: int, end: int) -> None:
        text = self.text[:end]
        n = len(text)
        doc = self.doc
        params: dict[str, str] = {}
        i = start
        while True:
            i = _cspan(text, i, "<%")
            if i >= n:
                break
            if text.startswith("<!ENTITY", i):
                c = _span(text, i + 8, _WS)
                is_param = c < n and text[c] == "%"
                name_start = _span(text, c, _WS + "%")
                name_end = _cspan(text, name_start, _WS)
                name = text[name_start:name_end] + ";"
                v = _span(text, name_end + 1, _WS)
                quote = text[v] if v < n else ""
                v += 1
                if quote not in ("'", '"'):
                    i = text.find(">", name_end)
                    if i == -1:
                        break
                    continue
                close = text.find(quote, v)
                raw = text[v:close] if close != -1 else text[v:]
                value = decode(raw, params, "%")
                target = params if is_param else doc.entities
                if not entity_ok(name, value, target):
                    self.fail(v, f"circular entity declaration &{name}")
                target.setdefault(name, value)
                if close == -1:
                    break
                i = close + 1
            elif text.startswith("<!ATTLIST", i):
                i = self._attlist(text, i)
            elif text.startswith("<!--", i):
                i = text.find("-->", i + 4)
                if i == -1:
                    break
            elif text.startswith("<?", i):
                close = text.find("?>", i + 2)
                if close == -1:
                    break
                self.proc_inst(text[i + 2:close])
                i = close + 1
            elif text[i] == "<":
                i = text.find(">", i)
                if i == -1:
                    break
            else:
                i += 1
                if not doc.standalone:
                    break

    def _attlist(self, text: str, i: int) -> int:
        n = len(text)
        t = _span(text, i + 9, _WS)
        if t >= n:
            self.fail(t, "unclosed <!ATTLIST")
        s = _cspan(text, t, _WS + ">")
        if s >= n or text[s] == ">":
            return s
        tag = text[t:s]
        defaults = self.doc.default_attrs
        while True:
            name_start = _span(text, s + 1, _WS)
            if name_start >= n or text[name_start] == ">":
                return name_start
            s = _cspan(text, name_start, _WS)
            if s >= n:
                self.fail(t, "malformed <!ATTLIST")
            attr_name = text[name_start:s]
            s = _span(text, s + 1, _WS)
            mode = " " if text.startswith("CDATA", s) else "*"
            if text.startswith("NOTATION", s):
                s = _span(text, s + 8, _WS)
            if s < n and text[s] == "(":
                s = text.find(")", s)
                if s == -1:
                    self.fail(t, "malformed <!ATTLIST")
            else:
                s = _cspan(text, s, _WS)
            s = _span(text, s, _WS + ")")
            if text.startswith("#FIXED", s):
                s = _span(text, s + 6, _WS)
            if s < n and text[s] == "#":
                s = _cspan(text, s, _WS + ">") - 1
                if mode == " ":
                    continue
                value = None
            elif s < n and text[s] in ("'", '"') and text.find(text[s], s + 1) != -1:
                v = s + 1
                s = text.find(text[s], v)
                value = decode(text[v:s], self.doc.entities, mode)
            else:
                self.fail(t, "malformed <!ATTLIST")
            defaults.setdefault(tag, []).append(DefaultAttr(attr_name, value, mode))

    # main loop

    def _default_mode(self, tag: str, attr_name: str) -> str:
        for default in self.doc.default_attrs.get(tag, ()):
            if default.name == attr_name:
                return default.mode
        return " "

    def _tag(self, d: int) -> int:
        text = self.text
        n = len(text)
        if self.cur is None:
            self.fail(d, "markup outside of root element")
        j = _cspan(text, d, _WS + "/>")
        name = text[d:j]
        j = _span(text, j, WHITESPACE)
        attrs: dict[str, str] = {}
        while j < n and text[j] not in "/>":
            k = _cspan(text, j, _WS + "=/>")
            attr_name = text[j:k]
            value = ""
            if k < n and (text[k] == "=" or text[k] in WHITESPACE):
                k = _span(text, k + 1, _WS + "=")
                quote = text[k] if k < n else ""
                if quote in ("'", '"'):
                    close = text.find(quote, k + 1)
                    if close == -1:
                        self.fail(d, f"missing {quote}")
                    value = decode(
                        text[k + 1:close],
                        self.doc.entities,
                        self._default_mode(name, attr_name),
                    )
                    k = close + 1
            attrs.setdefault(attr_name, value)
            j = _span(text, k, WHITESPACE)
        if j < n and text[j] == "/":
            if j + 1 >= n or text[j + 1] != ">":
                self.fail(d, "missing >")
            self.open_tag(name, attrs)
            self.close_tag(name, j + 1)
            return j + 1
        if j < n and text[j] == ">":
            self.open_tag(name, attrs)
            return j
        self.fail(d, "missing >")
        return j

    def _doctype(self, d: int) -> int:
        text = self.text
        n = len(text)
        in_subset = False
        s = d
        while s < n and (
            (not in_subset and text[s] != ">")
            or (in_subset and (text[s] != "]" or text[_span(text, s + 1, _WS):][:1] != ">"))
        ):
            s = _cspan(text, s + 1, "[]>")
            if s < n and text[s] == "[":
                in_subset = True
        if s >= n:
            self.fail(d, "unclosed <!DOCTYPE")
        if in_subset:
            self.internal_dtd(text.index("[", d) + 1, s)
            s += 1
        return s

    def parse(self) -> Element:
        text = self.text
        n = len(text)
        if n == 0:
            self.fail(0, "root tag missing")
        s = text.find("<")
        if s == -1:
            self.fail(n, "root tag missing")
        d = s
        while True:
            d = s + 1
            c = text[d] if d < n else ""
            if c and (c.isalpha() or c in "_:" or ord(c) >= 0x80):
                s = self._tag(d)
            elif c == "/":
                name_start = d + 1
                j = _cspan(text, name_start, _WS + ">")
                if j >= n:
                    self.fail(name_start, "missing >")
                self.close_tag(text[name_start:j], j)
                s = _span(text, j, _WS)
            elif text.startswith("!--", d):
                close = text.find("--", d + 3)
                if close == -1 or close + 2 >= n or text[close + 2] != ">":
                    self.fail(d, "unclosed <!--")
                s = close + 2
            elif text.startswith("![CDATA[", d):
                close = text.find("]]>", d)
                if close == -1:
                    self.fail(d, "unclosed <![CDATA[")
                self.char_content(text[d + 8:close], "c")
                s = close + 2
            elif text.startswith("!DOCTYPE", d):
                s = self._doctype(d)
            elif c == "?":
                close = text.find("?>", d)
                if close == -1:
                    self.fail(d, "unclosed <?")
                self.proc_inst(text[d + 1:close])
                s = close + 1
            else:
                self.fail(d, "unexpected <")

            if s >= n:
                break
            d = s = s + 1
            if s < n and text[s] != "<":
                s = text.find("<", s)
                if s == -1:
                    break
                self.char_content(text[d:s], "&")
            elif s >= n:
                break

        if self.cur is None:
            return self.root
        if self.cur.name is None:
            self.fail(d, "root tag missing")
        self.fail(d, f"unclosed tag <{self.cur.name}>")
        return self.root


def parse_str(text: str) -> Element:
    """Parse XML text and return the root element; raise ParseError on errors."""
    return _Parser(text).parse()


def parse_bytes(data: bytes) -> Element:
    """Parse XML bytes, UTF-8 or UTF-16 with a byte order mark."""
    converted = utf16_to_utf8(data)
    if converted is not None:
        data = converted
    return parse_str(data.decode("utf-8", errors="replace"))


def parse_fp(fp: Union[BinaryIO, TextIO]) -> Element:
    """Read a whole stream and parse it."""
    content = fp.read()
    if isinstance(content, str):
        return parse_str(content)
    return parse_bytes(content)


def parse_file(path) -> Element:
    """Parse the XML file at ``path``."""
    with open(path, "rb") as fp:
        return parse_bytes(fp.read())