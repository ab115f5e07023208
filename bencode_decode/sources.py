import io
import logging
import os
import sys
from typing import BinaryIO, Optional

import httpx

from .bencoding import READ_CHUNK_SIZE

HTTP_TIMEOUT = 15


class SourceException(OSError):
    pass


class HTTPSource(io.RawIOBase):
    """
    Тело GET-ответа как поток байт, читается по мере прихода данных
    """

    def __init__(
        self,
        url: str,
        client: Optional[httpx.Client] = None,
        timeout: float = HTTP_TIMEOUT,
    ) -> None:
        super().__init__()
        self.url = url
        self.response: Optional[httpx.Response] = None
        self._own_client = client is None
        self.client = client if client is not None else httpx.Client(timeout=timeout)
        self._pending = b""

        logging.debug(f"GET {url}")
        try:
            self.response = self.client.send(
                self.client.build_request("GET", url), stream=True
            )
        except httpx.HTTPError as e:
            self.close()
            raise SourceException(f"{url}: {e}") from e

        if self.response.status_code != 200:
            status_code = self.response.status_code
            self.close()
            raise SourceException(f"{url}: http status code {status_code} != 200")

        self._chunks = self.response.iter_bytes(READ_CHUNK_SIZE)

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        while not self._pending:
            try:
                chunk = next(self._chunks, None)
            except (httpx.HTTPError, httpx.StreamError) as e:
                raise SourceException(f"{self.url}: {e}") from e
            if chunk is None:
                return 0
            self._pending = chunk

        n = min(len(b), len(self._pending))
        b[:n] = self._pending[:n]
        self._pending = self._pending[n:]
        return n

    def close(self) -> None:
        if not self.closed:
            if self.response is not None:
                self.response.close()
            if self._own_client:
                self.client.close()
        super().close()


class StdinSource(io.RawIOBase):
    """
    stdin без владения: close() не закрывает sys.stdin.buffer
    """

    def __init__(self, stream: BinaryIO) -> None:
        super().__init__()
        self.stream = stream

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        data = self.stream.read1(len(b))  # type: ignore
        n = len(data)
        b[:n] = data
        return n


def open_source(location: str, client: Optional[httpx.Client] = None) -> BinaryIO:
    """
    "-" - stdin, http(s):// - HTTPSource, иначе путь к файлу
    """
    if location == "-":
        return StdinSource(sys.stdin.buffer)  # type: ignore

    if location.startswith(("http://", "https://")):
        return io.BufferedReader(HTTPSource(location, client), READ_CHUNK_SIZE)  # type: ignore

    if not os.path.exists(location):
        raise SourceException(f"Can't find {location}")
    logging.debug(f"open: {location}")
    return open(location, "rb")
