from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional
from urllib.parse import urlsplit

import requests
from requests.compat import chardet
from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)
from rich.table import Table

from .errors import FetchError, InvalidUrl

logger = logging.getLogger(__name__)

MOZILLA_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

_LANGUAGES = {
    "text/html": "html",
    "application/json": "json",
}


@dataclass
class Page:
    url: str
    body: str
    status_code: int = 200
    headers: Dict[str, str] = field(default_factory=dict)
    language: Optional[str] = None


def parse_url(raw: str) -> str:
    """校验 URL；没有协议时补上 https://"""
    candidate = (raw or "").strip()
    if not candidate:
        raise InvalidUrl("Invalid URL: empty")
    if "://" not in candidate:
        candidate = f"https://{candidate}"

    parts = urlsplit(candidate)
    if parts.scheme.lower() not in {"http", "https"}:
        raise InvalidUrl(f"Invalid URL '{raw}': unsupported scheme '{parts.scheme}'")
    try:
        parts.port
    except ValueError as e:
        raise InvalidUrl(f"Invalid URL '{raw}': {e}") from e
    if not parts.hostname:
        raise InvalidUrl(f"Invalid URL '{raw}': missing host")
    return candidate


def guess_language(headers: Mapping[str, str]) -> Optional[str]:
    content_type = headers.get("content-type") or headers.get("Content-Type") or ""
    return _LANGUAGES.get(content_type.split(";")[0].strip().lower())


class Fetcher:
    """下载单个页面；不做重试"""

    def __init__(
        self,
        timeout: int = 30,
        mozilla: bool = False,
        show_progress: bool = True,
        print_headers: bool = False,
        console: Optional[Console] = None,
        chunk_size: int = 16 * 1024,
    ):
        self.timeout = timeout
        self.mozilla = mozilla
        self.show_progress = show_progress
        self.print_headers = print_headers
        self.console = console or Console(stderr=True)
        self.chunk_size = chunk_size

    def request_headers(self) -> Dict[str, str]:
        return dict(MOZILLA_HEADERS) if self.mozilla else {}

    def fetch(self, url: str) -> Page:
        headers = self.request_headers()
        logger.debug("request headers %s", headers)

        with requests.Session() as session:
            try:
                response = session.get(
                    url,
                    timeout=self.timeout,
                    headers=headers,
                    allow_redirects=True,
                    stream=True,
                )
            except (requests.exceptions.InvalidURL, requests.exceptions.MissingSchema) as e:
                raise InvalidUrl(f"Invalid URL '{url}': {e}") from e
            except requests.RequestException as e:
                raise FetchError(f"Failed to GET from '{url}': {e}") from e

            try:
                if self.print_headers:
                    self._print_response_headers(response)

                if response.status_code >= 400:
                    raise FetchError(
                        f"Failed to GET from '{url}': HTTP {response.status_code} {response.reason or ''}".rstrip()
                    )

                content = self._read_body(response, url)
            except requests.RequestException as e:
                raise FetchError(f"Error while downloading '{url}': {e}") from e
            finally:
                response.close()

        response_headers = dict(response.headers)
        return Page(
            url=response.url or url,
            body=self._decode(response, content),
            status_code=response.status_code,
            headers=response_headers,
            language=guess_language(response.headers),
        )

    def _read_body(self, response: requests.Response, url: str) -> bytes:
        total = self._content_length(response)
        if total is None:
            logger.warning("no content-length header for '%s'", url)
            return response.content

        if not self.show_progress:
            return response.content

        buffer = bytearray()
        with self._progress() as progress:
            task = progress.add_task(f"Downloading {url}", total=total)
            for chunk in response.iter_content(chunk_size=self.chunk_size):
                if not chunk:
                    continue
                buffer.extend(chunk)
                progress.update(task, completed=min(len(buffer), total))
        return bytes(buffer)

    def _progress(self) -> Progress:
        return Progress(
            TextColumn("{task.description}"),
            SpinnerColumn(),
            TimeElapsedColumn(),
            BarColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            TimeRemainingColumn(),
            console=self.console,
            transient=True,
        )

    def _content_length(self, response: requests.Response) -> Optional[int]:
        value = response.headers.get("content-length")
        if not value:
            return None
        try:
            total = int(value)
        except ValueError:
            return None
        return total if total >= 0 else None

    def _decode(self, response: requests.Response, content: bytes) -> str:
        # requests 对未声明 charset 的 text/* 默认给出 ISO-8859-1，只有显式声明的才可信
        content_type = (response.headers.get("content-type") or "").lower()
        encoding = response.encoding if "charset=" in content_type else None
        if not encoding:
            try:
                return content.decode("utf-8")
            except UnicodeDecodeError:
                encoding = self._apparent_encoding(content)
        try:
            return content.decode(encoding, errors="replace")
        except LookupError:
            return content.decode("utf-8", errors="replace")

    def _apparent_encoding(self, content: bytes) -> str:
        # 与 Response.apparent_encoding 相同，但流式读取后 response.content 已不可用
        if chardet is None:
            return "utf-8"
        return chardet.detect(content)["encoding"] or "utf-8"

    def _print_response_headers(self, response: requests.Response) -> None:
        table = Table(title=f"HTTP {response.status_code} {response.reason or ''}".rstrip())
        table.add_column("Header", style="cyan")
        table.add_column("Value")
        for name, value in response.headers.items():
            table.add_row(name, value)
        self.console.print(table)
