"""Pytest configuration for tests.

No sys.path hacks - tests import from the installed devfile_parser package;
document builders live in helpers.py beside the tests.
"""

from pathlib import Path
from typing import Callable, Dict

import httpx
import pytest

from devfile_parser._internal.context import DefaultContextLoader
from devfile_parser.settings import ParserSettings
from helpers import to_yaml


@pytest.fixture
def settings() -> ParserSettings:
    """Settings independent of the environment."""
    return ParserSettings(_env_file=None)


@pytest.fixture
def write_devfile(tmp_path) -> Callable[[str, Dict], Path]:
    """Write a devfile dict under tmp_path and return its path."""
    def _write(relative: str, data: Dict) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(to_yaml(data))
        return path
    return _write


@pytest.fixture
def http_devfiles(settings):
    """Serve devfile dicts over a mock HTTP transport.

    Yields ``(documents, loader, requests)``: put wire dicts into
    ``documents`` keyed by URL; ``requests`` records every fetched URL.
    """
    documents: Dict[str, Dict] = {}
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        requests.append(url)
        if url not in documents:
            return httpx.Response(404, text="not found")
        return httpx.Response(200, content=to_yaml(documents[url]))

    client = httpx.Client(transport=httpx.MockTransport(handler))
    loader = DefaultContextLoader(settings, client=client)
    yield documents, loader, requests
    client.close()
