"""Build a static HTML site of books, chapters and verses from a bible XML file."""

from __future__ import annotations

import argparse
import os
import re
import sys
from pathlib import Path
from typing import Iterator, Optional, Sequence

from .element import Element
from .parser import ParseError, parse_file

_VIEWPORT = "<meta name='viewport' content='width=device-width, initial-scale=1.0' />"
_STYLE = "<style>* {font-family: sans;}</style>"
_CHAPTER_STYLE = (
    "<style>* {font-family: sans;}\n"
    "body,html {max-width: 400px;text-align: justify;}</style>"
)
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def url_name(bname: str) -> str:
    """Return the folder name for a book: spaces become underscores."""
    return bname.replace(" ", "_")


def _atoi(value: Optional[str]) -> int:
    if value is None:
        return 0
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else 0


def _each(parent: Element, name: str) -> Iterator[Element]:
    cur = parent.child(name)
    while cur is not None:
        yield cur
        cur = cur.next


def _append(path: Path, text: str) -> None:
    with open(path, "a", encoding="utf-8") as fp:
        fp.write(text)


def build_site(bible: Element, out_dir) -> None:
    """Write index pages and one page per chapter under ``out_dir``.

    Files are appended to, so building twice into the same folder repeats
    the content.
    """
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    main_index = out / "index.html"
    pbnum = pcnum = 0

    for book in _each(bible, "BIBLEBOOK"):
        for chap in _each(book, "CHAPTER"):
            for vers in _each(chap, "VERS"):
                bname = book.attr("bname") or ""
                bnum = _atoi(book.attr("bnumber"))
                cnum = _atoi(chap.attr("cnumber"))
                vnum = _atoi(vers.attr("vnumber"))
                text = vers.txt
                url = url_name(bname)
                book_dir = out / url
                book_index = book_dir / "index.html"

                if bnum != pbnum:
                    if bnum == 1:
                        _append(
                            main_index,
                            _VIEWPORT
                            + _STYLE
                            + "<h1>King James Version</h1>"
                            + "<h2>Old Testament</h2>",
                        )
                    elif bnum == 40:
                        _append(main_index, "<h2>New Testament</h2>")
                    try:
                        os.mkdir(book_dir)
                    except OSError as exc:
                        print(f"Error: {exc.strerror}")
                    _append(main_index, f"<a href='{url}/index.html'>{bname}</a><br/>")

                if bnum != pbnum or cnum != pcnum:
                    if cnum == 1:
                        _append(book_index, _VIEWPORT + _STYLE + f"<h1>{bname}</h1>")
                    _append(
                        book_index,
                        f"<a href='Chapter_{cnum}.html'>Chapter {cnum}</a><br/>",
                    )

                page = []
                if vnum == 1:
                    page.append(
                        _VIEWPORT
                        + _CHAPTER_STYLE
                        + f"<h1>{bname}</h1><h2>Chapter {cnum}</h2>"
                    )
                page.append(f"{vnum} {text}<br/><br/>")
                _append(book_dir / f"Chapter_{cnum}.html", "".join(page))

                pbnum, pcnum = bnum, cnum


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Build the site from a bible XML file."""
    parser = argparse.ArgumentParser(description="Build an HTML site from a bible XML file.")
    parser.add_argument("source", nargs="?", default="kjv.xml")
    parser.add_argument("out_dir", nargs="?", default="bible")
    args = parser.parse_args(argv)
    try:
        bible = parse_file(args.source)
    except ParseError as exc:
        print(exc.message, file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"{args.source}: {exc.strerror or exc}", file=sys.stderr)
        return 1
    build_site(bible, args.out_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())