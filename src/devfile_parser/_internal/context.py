"""Devfile loading context: raw bytes plus where they came from."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional, Tuple, Union
from urllib.parse import urljoin, urlparse

import httpx
import yaml

from devfile_parser.codes import ErrorCode
from devfile_parser.kernel.errors import ContextError, FetchError
from devfile_parser.settings import ParserSettings, get_settings

logger = logging.getLogger(__name__)

SourceKind = Literal["path", "url", "data"]

IN_MEMORY_LOCATION = "<in-memory devfile>"


def is_url(uri: str) -> bool:
    """Return True for http(s) URIs."""
    return uri.lower().startswith(("http://", "https://"))


@dataclass
class DevfileContext:
    """Raw devfile content and its source.

    ``api_version`` is populated by validate().
    """
    content: bytes
    kind: SourceKind
    location: Optional[str] = None
    api_version: Optional[str] = None

    @property
    def identity(self) -> str:
        """Normalized location used to detect reference cycles."""
        return self.location or IN_MEMORY_LOCATION

    def reference_location(self, uri: str) -> Tuple[SourceKind, str]:
        """Resolve a parent/plugin ``uri`` relative to this document.

        http(s) URIs are used as-is. Other URIs are file paths, relative to
        this document's directory (or joined to its URL, or relative to the
        working directory for in-memory documents).

        Raises:
            FetchError: If ``uri`` is not a well-formed URI
        """
        try:
            parsed = urlparse(uri)
            joined = urljoin(self.location, uri) if self.kind == "url" and self.location else None
        except ValueError as e:
            raise FetchError(f"invalid devfile reference {uri!r}: {e}", uri=uri) from e
        if is_url(uri):
            if not parsed.netloc:
                raise FetchError(f"invalid devfile reference {uri!r}: missing host", uri=uri)
            return "url", uri
        if joined is not None:
            return "url", joined
        if parsed.scheme == "file":
            return "path", str(Path(parsed.path).resolve())
        base = Path(self.location).parent if self.kind == "path" and self.location else Path.cwd()
        return "path", str((base / Path(uri).expanduser()).resolve())

    def validate(self, settings: Optional[ParserSettings] = None) -> None:
        """Check size, readability and schema version.

        Raises:
            ContextError: If the content is empty, too large, not a YAML
                mapping, or declares a missing/unsupported version
        """
        settings = settings or get_settings()
        if not self.content.strip():
            raise ContextError("devfile content is empty", uri=self.location)
        if len(self.content) > settings.max_document_bytes:
            raise ContextError(
                f"devfile is {len(self.content)} bytes, exceeding the limit of {settings.max_document_bytes}",
                uri=self.location,
            )
        try:
            raw = yaml.safe_load(self.content)
        except yaml.YAMLError as e:
            raise ContextError(f"failed to read devfile: {e}", uri=self.location) from e
        if not isinstance(raw, dict):
            raise ContextError("devfile content must be a mapping", uri=self.location)

        version = raw.get("apiVersion", raw.get("schemaVersion"))
        if version is None:
            raise ContextError(
                "devfile does not declare apiVersion or schemaVersion",
                uri=self.location,
                code=ErrorCode.UNSUPPORTED_API_VERSION,
            )
        version = str(version)
        if version not in settings.supported_api_versions:
            raise ContextError(
                f"unsupported devfile version '{version}'; supported: {', '.join(settings.supported_api_versions)}",
                uri=self.location,
                code=ErrorCode.UNSUPPORTED_API_VERSION,
            )
        self.api_version = version


class DefaultContextLoader:
    """Loads devfiles from the filesystem, over HTTP(S), or from memory.

    Pass ``client`` to reuse an ``httpx.Client`` (connection pooling, custom
    transports); otherwise a short-lived client is created per fetch.
    """

    def __init__(self, settings: Optional[ParserSettings] = None, client: Optional[httpx.Client] = None):
        self.settings = settings or get_settings()
        self._client = client

    def load_from_path(self, path: Union[str, Path]) -> DevfileContext:
        if not str(path):
            raise ContextError("devfile path is empty")
        resolved = Path(path).expanduser().resolve()
        try:
            content = resolved.read_bytes()
        except FileNotFoundError as e:
            raise FetchError(f"devfile not found: {resolved}", uri=str(resolved)) from e
        except OSError as e:
            raise FetchError(f"failed to read devfile {resolved}: {e}", uri=str(resolved)) from e
        logger.debug("read devfile %s (%d bytes)", resolved, len(content))
        return DevfileContext(content=content, kind="path", location=str(resolved))

    def load_from_url(self, url: str) -> DevfileContext:
        try:
            parsed = urlparse(url)
        except ValueError as e:
            raise ContextError(f"invalid devfile URL: {url!r}: {e}", uri=url) from e
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ContextError(f"invalid devfile URL: {url!r}", uri=url)
        try:
            if self._client is not None:
                response = self._client.get(url)
            else:
                with httpx.Client(timeout=self.settings.http_timeout, follow_redirects=True) as client:
                    response = client.get(url)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FetchError(f"failed to retrieve devfile from {url}: {e}", uri=url) from e
        logger.debug("fetched devfile %s (%d bytes)", url, len(response.content))
        return DevfileContext(content=response.content, kind="url", location=url)

    def load_from_bytes(self, data: bytes) -> DevfileContext:
        if not isinstance(data, (bytes, bytearray)):
            raise ContextError(f"failed to set devfile content from bytes: expected bytes, got {type(data).__name__}")
        return DevfileContext(content=bytes(data), kind="data")
