"""Public collaborator contracts and the parse result handle."""

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, Union

from devfile_parser.kernel.model import Document

if TYPE_CHECKING:
    from devfile_parser._internal.context import DevfileContext


class ContextLoader(Protocol):
    """Acquires raw devfile bytes from a path, a URL or memory."""

    def load_from_path(self, path: Union[str, Path]) -> "DevfileContext":
        ...

    def load_from_url(self, url: str) -> "DevfileContext":
        ...

    def load_from_bytes(self, data: bytes) -> "DevfileContext":
        ...


class DocumentDecoder(Protocol):
    """Decodes raw devfile bytes into a Document."""

    def decode(self, content: bytes, api_version: str) -> Document:
        ...


@dataclass(frozen=True)
class DevfileObj:
    """A decoded devfile together with the context it was loaded from."""
    ctx: "DevfileContext"
    data: Document
