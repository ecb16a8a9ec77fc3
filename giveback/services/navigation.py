from typing import Protocol
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit


class Navigator(Protocol):
    def get_param(self, name: str) -> str | None: ...

    def set_params(self, **params: str) -> None: ...


class UrlNavigator:
    """Keeps the navigable address of a page and its back/forward history.

    ``set_params`` replaces the whole query string, like pushing a new
    history entry with only the given parameters. Empty values are dropped
    so that an empty search leaves a clean URL.
    """

    def __init__(self, url: str = "/search"):
        self._history = [url]
        self._index = 0

    @property
    def url(self) -> str:
        return self._history[self._index]

    @property
    def history(self) -> list[str]:
        return list(self._history[: self._index + 1])

    def get_param(self, name: str) -> str | None:
        return dict(parse_qsl(urlsplit(self.url).query)).get(name)

    def set_params(self, **params: str) -> None:
        parts = urlsplit(self.url)
        query = urlencode({k: v for k, v in params.items() if v})
        url = urlunsplit((parts.scheme, parts.netloc, parts.path, query, ""))
        if url == self.url:
            return
        # a new entry drops anything ahead of the current position
        del self._history[self._index + 1 :]
        self._history.append(url)
        self._index += 1

    def back(self) -> bool:
        if self._index == 0:
            return False
        self._index -= 1
        return True

    def forward(self) -> bool:
        if self._index >= len(self._history) - 1:
            return False
        self._index += 1
        return True
