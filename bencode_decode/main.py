import argparse
import logging
from typing import List, Optional

from .bencoding import DecodingError, Scanner, decode_stream, iter_values
from .sources import SourceException, open_source
from .torrent import Torrent, TorrentException
from .values import ByteString, Dictionary, Integer, Value
from .values import List as ListValue

HEX_PREVIEW = 20


def _format_bytes(b: bytes) -> str:
    if all(0x20 <= c <= 0x7E for c in b):
        return repr(b.decode("ascii"))
    preview = b[:HEX_PREVIEW].hex()
    if len(b) > HEX_PREVIEW:
        preview += "..."
    return f"hex({len(b)} bytes):'{preview}'"


def format_value(value: Value, indent: int = 0) -> str:
    pad = "  " * indent
    if isinstance(value, ByteString):
        return _format_bytes(value.value)
    if isinstance(value, Integer):
        return str(value.value)
    if isinstance(value, ListValue):
        if not len(value):
            return "[]"
        lines = [f"{pad}  {format_value(item, indent + 1)}" for item in value]
        return "[\n" + "\n".join(lines) + f"\n{pad}]"
    if isinstance(value, Dictionary):
        if not len(value):
            return "{}"
        lines = [
            f"{pad}  {_format_bytes(key)}: {format_value(item, indent + 1)}"
            for key, item in value.items()
        ]
        return "{\n" + "\n".join(lines) + f"\n{pad}}}"
    raise TypeError(f"not a bencoded value: {value!r}")


def _print_torrent(torrent: Torrent) -> None:
    print(f"name: {torrent.name}")
    print(f"total size: {torrent.total_size}")
    print(f"piece length: {torrent.piece_length}")
    print(f"pieces: {torrent.number_of_pieces}")
    if torrent.comment:
        print(f"comment: {torrent.comment}")
    if torrent.created_by:
        print(f"created by: {torrent.created_by}")
    for url in torrent.announce_list:
        print(f"tracker: {url}")
    for file in torrent.files:
        print(f"file: {file.path} ({file.size} bytes)")


def main(argv: Optional[List[str]] = None) -> None:

    parser = argparse.ArgumentParser(description="decode bencoded data")
    parser.add_argument("-v", "--verbose", help="debug log", action="store_true")
    parser.add_argument("-l", "--log-file", help="log file")
    parser.add_argument(
        "-t", "--tokens", help="print raw tokens", action="store_true"
    )
    parser.add_argument(
        "-a", "--all", help="decode every top-level value", action="store_true"
    )
    parser.add_argument(
        "--torrent", help="print .torrent metainfo summary", action="store_true"
    )
    parser.add_argument("source", help="file path, http(s) url or - for stdin")

    args = parser.parse_args(argv)

    if args.verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    if args.log_file:
        logging.basicConfig(
            filename=args.log_file,
            filemode="a",
            level=level,
            format="%(levelname)s:%(filename)s:%(lineno)s:%(message)s",
        )
    else:
        logging.basicConfig(
            level=level, format="%(levelname)s:%(filename)s:%(lineno)s:%(message)s"
        )

    try:
        if args.torrent:
            _print_torrent(Torrent.from_source(args.source))
            return

        with open_source(args.source) as f:
            if args.tokens:
                for token in Scanner(f):
                    print(token)
            elif args.all:
                for value in iter_values(f):
                    print(format_value(value))
            else:
                value = decode_stream(f)
                if value is None:
                    logging.info(f"{args.source}: no value")
                else:
                    print(format_value(value))
    except (DecodingError, SourceException, TorrentException) as e:
        logging.error(f"{args.source}: {type(e).__name__}: {e}")
        raise SystemExit(1)
