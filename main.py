import argparse
import io
import logging
import sys

from rich import print
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from mailheaders import HeaderParseError, HeaderStore
from mailheaders.config import DEFAULT_DELIMITER, set_canonical_order_from_file


def to_crlf(data: bytes) -> bytes:
    """Normalise bare LF line endings to CRLF."""
    return data.replace(b'\r\n', b'\n').replace(b'\n', b'\r\n')


def pretty_print_headers(store, include=None, exclude=None):
    if include:
        headers = store.get_matching_headers(include)
    else:
        headers = store.get_non_matching_headers(exclude or [])

    table = Table(title='Headers')
    table.add_column('#', justify='right')
    table.add_column('Name', style='bold')
    table.add_column('Value')
    count = 0
    for h in headers:
        count += 1
        table.add_row(str(count), escape(h.name), escape(h.value))
    print(table)
    print(f"{count} header(s)")


def pretty_print_values(store, names, delimiter):
    print('\n[bold underline]Lookups[/bold underline]')
    for name in names:
        value = store.get_header(name, delimiter)
        if value is None:
            print(f"{escape(name)}: [yellow]not present[/yellow]")
        else:
            print(f"{escape(name)}: {escape(value)}")


def build_parser():
    parser = argparse.ArgumentParser(description='RFC822 header inspector')
    parser.add_argument('header_file', help='Path to raw header file')
    parser.add_argument('--name', action='append', default=[], help='Print the value(s) of this header (repeatable)')
    parser.add_argument('--include', action='append', default=[], help='Only list these headers (repeatable)')
    parser.add_argument('--exclude', action='append', default=[],
                        help='Leave these headers out of the listing and --write output (repeatable)')
    parser.add_argument('--delimiter', default=DEFAULT_DELIMITER, help='Separator for multi-value headers')
    parser.add_argument('--write', help='Write the (filtered) header block to this path', default=None)
    parser.add_argument('--order-file', help='JSON or plain list of header names to use as canonical order',
                        default=None)
    parser.add_argument('--raw', action='store_true', help='Do not convert bare LF line endings to CRLF')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(message)s',
        handlers=[RichHandler(show_path=False)],
    )

    if args.order_file:
        ok = set_canonical_order_from_file(args.order_file)
        if not ok:
            print(f"[yellow]Warning:[/yellow] failed to load header order from {escape(args.order_file)}; using defaults.")

    try:
        with open(args.header_file, 'rb') as f:
            data = f.read()
    except OSError as e:
        print(f"[red]Error:[/red] cannot read {escape(args.header_file)}: {escape(str(e))}")
        return 1

    if not args.raw:
        data = to_crlf(data)

    store = HeaderStore()
    try:
        store.load(io.BytesIO(data))
    except HeaderParseError as e:
        print(f"[red]Error:[/red] {escape(e.message)}: {escape(str(e.cause))}")
        return 1

    pretty_print_headers(store, include=args.include, exclude=args.exclude)

    if args.name:
        pretty_print_values(store, args.name, args.delimiter)

    if args.write:
        try:
            with open(args.write, 'wb') as out:
                store.write_to(out, args.exclude)
        except OSError as e:
            print(f"[red]Error:[/red] cannot write {escape(args.write)}: {escape(str(e))}")
            return 1
        print(f"\nWrote headers to {escape(args.write)}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
