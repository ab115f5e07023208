"""
Типы

Строки - <длина строки>:<строка>
4:spam, 1:a

Целые числа - i<число>e
i3e, i0e, i-3e
i03e, i-0e - нельзя

Списки - l<bencoded элементы>e
l4:spam1:ae - ["spam", "a"]
le - []

Словари - d<bencoded строка><bencoded элемент>e
d4:spam1:ae - {"spam": "a"}
de - {}

Scanner читает поток по одному токену, decode собирает из токенов
одно значение верхнего уровня.
"""

import enum
import io
import logging
import re
from typing import BinaryIO, Iterator, Optional

from .values import INT64_MAX, INT64_MIN, ByteString, Dictionary, Integer, List, Value

READ_CHUNK_SIZE = 2 ** 14  # 16KiB
MAX_INTEGER_LENGTH = len(str(INT64_MIN))
MAX_LENGTH_LENGTH = 20

_INTEGER_RE = re.compile(rb"-?(0|[1-9][0-9]*)")


class DecodingError(Exception):
    def __init__(self, message: str = "", offset: Optional[int] = None) -> None:
        if offset is not None:
            message = f"{message} (at byte {offset})"
        super().__init__(message)
        self.offset = offset


class InvalidLength(DecodingError):
    pass


class InvalidInteger(DecodingError):
    pass


class UnexpectedToken(DecodingError):
    pass


class UnexpectedEnd(DecodingError):
    pass


class InvalidDictionaryKey(DecodingError):
    pass


class IoFailure(DecodingError):
    pass


class TokenType(enum.Enum):
    BYTE_STRING = 0
    INTEGER = 1
    LIST_START = 2
    DICT_START = 3
    END = 4
    EOF = 5


class Token:
    def __init__(self, type_: TokenType, value: Optional[Value] = None) -> None:
        self.type = type_
        self.value = value

    def is_value(self) -> bool:
        return self.value is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return self.type == other.type and self.value == other.value

    def __repr__(self) -> str:
        if self.value is None:
            return f"Token({self.type.name})"
        return f"Token({self.type.name}, {self.value!r})"

    def __str__(self) -> str:
        if self.value is None:
            return self.type.name
        return f"{self.type.name} {self.value}"


LIST_START = Token(TokenType.LIST_START)
DICT_START = Token(TokenType.DICT_START)
END = Token(TokenType.END)
EOF = Token(TokenType.EOF)


def _is_int(b: bytes) -> bool:
    return b"0" <= b and b <= b"9"


class Scanner:
    """
    Токены из потока байт. Между вызовами хранится только позиция в потоке.
    """

    def __init__(self, source: BinaryIO) -> None:
        self.source = source
        self.offset = 0

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            if token.type is TokenType.EOF:
                return
            yield token

    def _read(self, n: int) -> bytes:
        try:
            data = self.source.read(n)
        except OSError as e:
            raise IoFailure(str(e), self.offset) from e
        if data is None:
            data = b""
        self.offset += len(data)
        return data

    def _read_exact(self, n: int) -> bytes:
        acc = io.BytesIO()
        left = n
        while left > 0:
            chunk = self._read(min(left, READ_CHUNK_SIZE))
            if not chunk:
                raise UnexpectedEnd(
                    f"string of {n} bytes is cut after {n - left}", self.offset
                )
            acc.write(chunk)
            left -= len(chunk)
        return acc.getvalue()

    def next_token(self) -> Token:
        start = self.offset
        c = self._read(1)
        if not c:
            return EOF

        if _is_int(c):
            length = self._decode_length(c, start)
            return Token(TokenType.BYTE_STRING, ByteString(self._read_exact(length)))
        elif c == b"i":
            return Token(TokenType.INTEGER, Integer(self._decode_int(start)))
        elif c == b"l":
            return LIST_START
        elif c == b"d":
            return DICT_START
        elif c == b"e":
            return END
        else:
            raise UnexpectedToken(f"unexpected byte {c!r}", start)

    def _decode_length(self, c: bytes, start: int) -> int:
        acc = io.BytesIO()
        while c != b":":
            if not c:
                raise UnexpectedEnd("string length is not terminated", self.offset)
            if not _is_int(c):
                raise InvalidLength(
                    f"unexpected byte {c!r} in string length", self.offset - 1
                )
            if acc.tell() >= MAX_LENGTH_LENGTH:
                raise InvalidLength("string length is too long", start)
            acc.write(c)
            c = self._read(1)

        v = acc.getvalue()
        if v.startswith(b"0") and len(v) > 1:
            raise InvalidLength(f"string length {v!r} has a leading zero", start)
        try:
            return int(v)
        except ValueError as e:
            raise InvalidLength(f"malformed string length {v!r}", start) from e

    def _decode_int(self, start: int) -> int:
        acc = io.BytesIO()
        c = self._read(1)
        while c != b"e":
            if not c:
                raise UnexpectedEnd("integer is not terminated", self.offset)
            if acc.tell() >= MAX_INTEGER_LENGTH:
                raise InvalidInteger("integer is too long", start)
            acc.write(c)
            c = self._read(1)

        v = acc.getvalue()
        if not _INTEGER_RE.fullmatch(v):
            raise InvalidInteger(f"malformed integer {v!r}", start)
        if v == b"-0":
            raise InvalidInteger("negative zero", start)  # i-0e - неправильно
        n = int(v)
        if not INT64_MIN <= n <= INT64_MAX:
            raise InvalidInteger(f"integer {n} does not fit in 64 bits", start)
        return n


def next_token(source: BinaryIO) -> Token:
    return Scanner(source).next_token()


class _Container:
    def __init__(self, type_: TokenType, offset: int) -> None:
        self.type = type_
        self.offset = offset
        self.items: list = []

        # только для словарей
        self.key: Optional[bytes] = None
        self.seen: set = set()

    def add(self, elem: Value, offset: int) -> None:
        if self.type is TokenType.LIST_START:
            self.items.append(elem)
        elif self.key is None:
            # ключ не может быть не строкой
            if not isinstance(elem, ByteString):
                raise InvalidDictionaryKey(
                    f"dictionary key must be a byte string, not {type(elem).__name__}",
                    offset,
                )
            if elem.value in self.seen:
                raise InvalidDictionaryKey(
                    f"duplicate dictionary key {elem.value!r}", offset
                )
            self.seen.add(elem.value)
            self.key = elem.value
        else:
            self.items.append((self.key, elem))
            self.key = None

    def build(self, offset: int) -> Value:
        if self.type is TokenType.LIST_START:
            return List(self.items)
        if self.key is not None:
            raise UnexpectedEnd(f"no value for dictionary key {self.key!r}", offset)
        return Dictionary(self.items)


def decode(scanner: Scanner, current: Optional[Token] = None) -> Optional[Value]:
    """
    Одно значение верхнего уровня. None, если значений больше нет.

    current - уже прочитанный токен, с которого нужно начать.
    """
    token = current if current is not None else scanner.next_token()
    if token.type in (TokenType.END, TokenType.EOF):
        return None

    stack = []  # type: ignore
    while True:
        if token.type in (TokenType.LIST_START, TokenType.DICT_START):
            stack.append(_Container(token.type, scanner.offset - 1))
            token = scanner.next_token()
            continue

        if token.is_value():
            elem = token.value  # type: ignore
        elif token.type is TokenType.EOF:
            container = stack[-1]
            kind = "list" if container.type is TokenType.LIST_START else "dictionary"
            raise UnexpectedEnd(
                f"{kind} opened at byte {container.offset} is not closed",
                scanner.offset,
            )
        else:
            elem = stack.pop().build(scanner.offset)

        if not stack:
            return elem
        stack[-1].add(elem, scanner.offset)
        token = scanner.next_token()


def decode_stream(stream: BinaryIO) -> Optional[Value]:
    return decode(Scanner(stream))


def decode_bytes(data: bytes) -> Value:
    """
    Ровно одно значение из буфера, без лишних байт в конце
    """
    buf = io.BytesIO(data)
    scanner = Scanner(buf)

    token = scanner.next_token()
    if token.type is TokenType.EOF:
        raise UnexpectedEnd("empty input", 0)
    if token.type is TokenType.END:
        raise UnexpectedToken("unexpected b'e' at top level", 0)

    value = decode(scanner, token)
    if buf.read(1):
        raise UnexpectedToken("trailing data after value", scanner.offset)
    return value  # type: ignore


def iter_values(stream: BinaryIO) -> Iterator[Value]:
    scanner = Scanner(stream)
    while True:
        start = scanner.offset
        token = scanner.next_token()
        if token.type is TokenType.EOF:
            return
        if token.type is TokenType.END:
            raise UnexpectedToken("unexpected b'e' at top level", start)

        value = decode(scanner, token)
        logging.debug(
            f"decoded {type(value).__name__} at bytes {start}..{scanner.offset}"
        )
        yield value  # type: ignore
