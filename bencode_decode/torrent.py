import logging
import math
from typing import List, Optional

from .bencoding import decode_stream
from .sources import open_source
from .values import ByteString, Dictionary, Integer, Value
from .values import List as ListValue

PIECE_HASH_LENGTH = 20  # SHA-1


class TorrentException(Exception):
    pass


class TorrentFile:
    def __init__(self, path: str, offset: int, size: int) -> None:
        self.path = path
        self.size = size
        self.offset = offset
        self.end = offset + size

    def __str__(self) -> str:
        return f"TorrentFile: path={self.path}, size={self.size}, offset={self.offset}"


def _field(d: Dictionary, key: bytes, kind: type, required: bool = True):
    value = d.get(key)
    if value is None:
        if required:
            raise TorrentException(f"missing {key.decode()!r}")
        return None
    if not isinstance(value, kind):
        raise TorrentException(f"{key.decode()!r} is not a {kind.__name__}")
    return value


def _text(value: Optional[ByteString]) -> Optional[str]:
    if value is None:
        return None
    return value.value.decode("utf-8", errors="replace")


class Torrent:
    """
    Обёртка над декодированным .torrent файлом
    """

    def __init__(self, data: Value) -> None:
        if not isinstance(data, Dictionary):
            raise TorrentException("metainfo is not a dictionary")
        self.data = data

        self.announce = _text(_field(data, b"announce", ByteString, required=False))
        self.announce_list: List[str] = []
        if self.announce:
            self.announce_list.append(self.announce)
        tiers = _field(data, b"announce-list", ListValue, required=False) or []
        for tier in tiers:
            if not isinstance(tier, ListValue):
                raise TorrentException("'announce-list' tier is not a List")
            for item in tier:
                if not isinstance(item, ByteString):
                    raise TorrentException("'announce-list' url is not a ByteString")
                url = _text(item)
                if url not in self.announce_list:
                    self.announce_list.append(url)  # type: ignore

        self.comment = _text(_field(data, b"comment", ByteString, required=False))
        self.created_by = _text(
            _field(data, b"created by", ByteString, required=False)
        )
        creation_date = _field(data, b"creation date", Integer, required=False)
        self.creation_date = creation_date.value if creation_date is not None else None

        self.info = _field(data, b"info", Dictionary)
        self.name = _text(_field(self.info, b"name", ByteString))

        pieces = _field(self.info, b"pieces", ByteString).value
        if len(pieces) % PIECE_HASH_LENGTH:
            raise TorrentException(
                f"'pieces' length {len(pieces)} is not a multiple of {PIECE_HASH_LENGTH}"
            )
        self.pieces = [
            pieces[offset : offset + PIECE_HASH_LENGTH]
            for offset in range(0, len(pieces), PIECE_HASH_LENGTH)
        ]

        # байтов в одном куске
        self.piece_length = _field(self.info, b"piece length", Integer).value
        if self.piece_length <= 0:
            raise TorrentException(f"'piece length' {self.piece_length} is not positive")

        files = _field(self.info, b"files", ListValue, required=False)
        self.files: List[TorrentFile] = []
        self.total_size = 0
        if files is not None:
            self.is_multi = True
            for file in files:
                if not isinstance(file, Dictionary):
                    raise TorrentException("'files' entry is not a Dictionary")
                length = _field(file, b"length", Integer).value
                parts = []
                for part in _field(file, b"path", ListValue):
                    if not isinstance(part, ByteString):
                        raise TorrentException("'path' part is not a ByteString")
                    parts.append(_text(part))
                path = "/".join([self.name] + parts)  # type: ignore
                self.files.append(TorrentFile(path, self.total_size, length))
                self.total_size += length
        else:
            self.is_multi = False
            self.total_size = _field(self.info, b"length", Integer).value
            self.files.append(TorrentFile(self.name, 0, self.total_size))  # type: ignore

        # кол-во кусков, включая последний
        self.number_of_pieces = math.ceil(self.total_size / self.piece_length)
        if self.number_of_pieces != len(self.pieces):
            logging.warning(
                f"{self.name}: {len(self.pieces)} piece hashes for "
                f"{self.number_of_pieces} pieces"
            )

        logging.debug("------------------------")
        logging.debug("Reading torrent file...")
        logging.debug(f"Announce list: {self.announce_list}")
        logging.debug(f"is_multi: {self.is_multi}")
        logging.debug(f"files: {[str(f) for f in self.files]}")
        logging.debug(f"total_size: {(self.total_size / 1000_000):.2f} mb")
        logging.debug(f"piece_length: {self.piece_length}")
        logging.debug(f"number_of_pieces: {self.number_of_pieces}")
        logging.debug("------------------------")

    @classmethod
    def from_source(cls, location: str) -> "Torrent":
        with open_source(location) as f:
            data = decode_stream(f)
        if data is None:
            raise TorrentException(f"{location}: no bencoded value")
        return cls(data)

    def __str__(self) -> str:
        return f"Torrent: name={self.name}, size={self.total_size}, pieces={self.number_of_pieces}"
