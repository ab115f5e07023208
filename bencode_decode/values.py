"""
Значения bencoding

ByteString - произвольные байты
Integer - знаковое 64-битное число
List - упорядоченный список значений
Dictionary - ключи-байты, хранятся отсортированными

Порядок между типами: ByteString < Integer < List < Dictionary
"""

from functools import total_ordering
from typing import Any, Iterable, Iterator, Mapping, Optional, Tuple, Union

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


@total_ordering
class Value:
    rank = -1

    def _key(self) -> Any:
        raise NotImplementedError

    def to_python(self) -> Any:
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self.rank == other.rank and self._key() == other._key()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        if self.rank != other.rank:
            return self.rank < other.rank
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash((self.rank, self._key()))


class ByteString(Value):
    rank = 0

    def __init__(self, value: bytes) -> None:
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError(f"ByteString expects bytes, not {type(value).__name__}")
        self.value = bytes(value)

    def _key(self) -> bytes:
        return self.value

    def to_python(self) -> bytes:
        return self.value

    def __len__(self) -> int:
        return len(self.value)

    def __repr__(self) -> str:
        return f"ByteString({self.value!r})"

    def __str__(self) -> str:
        return repr(self.value)


class Integer(Value):
    rank = 1

    def __init__(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"Integer expects int, not {type(value).__name__}")
        if not INT64_MIN <= value <= INT64_MAX:
            raise ValueError(f"{value} does not fit in 64 bits")
        self.value = value

    def _key(self) -> int:
        return self.value

    def to_python(self) -> int:
        return self.value

    def __repr__(self) -> str:
        return f"Integer({self.value})"

    def __str__(self) -> str:
        return str(self.value)


class List(Value):
    rank = 2

    def __init__(self, items: Iterable[Value] = ()) -> None:
        self.items: Tuple[Value, ...] = tuple(items)

    def _key(self) -> Tuple[Value, ...]:
        return self.items

    def to_python(self) -> list:
        return [item.to_python() for item in self.items]

    def __getitem__(self, i: int) -> Value:
        return self.items[i]

    def __iter__(self) -> Iterator[Value]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __repr__(self) -> str:
        return f"List({list(self.items)!r})"

    def __str__(self) -> str:
        return "[" + ", ".join(str(item) for item in self.items) + "]"


class Dictionary(Value):
    """
    Ключи всегда bytes, порядок ключей - побайтовый, независимо от
    порядка во входных данных
    """

    rank = 3

    def __init__(
        self,
        items: Union[Mapping[bytes, Value], Iterable[Tuple[bytes, Value]]] = (),
    ) -> None:
        if isinstance(items, Mapping):
            items = items.items()
        pairs = list(items)
        for key, _ in pairs:
            if not isinstance(key, bytes):
                raise TypeError(
                    f"Dictionary keys must be bytes, not {type(key).__name__}"
                )
        self._items = dict(sorted(pairs, key=lambda kv: kv[0]))

    def _key(self) -> Tuple[Tuple[bytes, Value], ...]:
        return tuple(self._items.items())

    def to_python(self) -> dict:
        return {key: value.to_python() for key, value in self._items.items()}

    def get(self, key: bytes, default: Optional[Value] = None) -> Optional[Value]:
        return self._items.get(key, default)

    def keys(self):
        return self._items.keys()

    def values(self):
        return self._items.values()

    def items(self):
        return self._items.items()

    def __getitem__(self, key: bytes) -> Value:
        return self._items[key]

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Dictionary({self._items!r})"

    def __str__(self) -> str:
        return (
            "{"
            + ", ".join(f"{key!r}: {value}" for key, value in self._items.items())
            + "}"
        )
