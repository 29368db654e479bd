"""Command that parses an XML file and writes it back out."""

from __future__ import annotations

import sys
from typing import Optional, Sequence

from .parser import ParseError, parse_file
from .serializer import to_xml


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse one XML file, print it as XML and report any parser error."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        print("usage: ezxtree xmlfile", file=sys.stderr)
        return 2

    error = ""
    try:
        root = parse_file(args[0])
    except ParseError as exc:
        root = exc.element
        error = exc.message
    except OSError as exc:
        print(f"{args[0]}: {exc.strerror or exc}", file=sys.stderr)
        return 1

    print(to_xml(root))
    if error:
        sys.stderr.write(error)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())