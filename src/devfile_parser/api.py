"""Public API for devfile_parser.

High-level functions that load, decode and (optionally) flatten a devfile.
Each returns a DevfileObj or raises a DevfileError subclass; a failed
flatten never returns a partially resolved document.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from devfile_parser._internal.context import DefaultContextLoader, DevfileContext
from devfile_parser._internal.decoder import YamlDocumentDecoder
from devfile_parser.contracts import ContextLoader, DevfileObj, DocumentDecoder
from devfile_parser.kernel.resolver import ReferenceResolver
from devfile_parser.settings import ParserSettings, get_settings

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike, Path]


def parse_devfile(
    ctx: DevfileContext,
    flatten: bool,
    *,
    loader: Optional[ContextLoader] = None,
    decoder: Optional[DocumentDecoder] = None,
    settings: Optional[ParserSettings] = None,
) -> DevfileObj:
    """
    Validate, decode and optionally flatten a loaded devfile.

    Args:
        ctx: Loaded devfile context
        flatten: Resolve parent and plugin references if True
        loader: Loader for referenced documents (default: DefaultContextLoader)
        decoder: Document decoder (default: YamlDocumentDecoder)
        settings: Parser settings (default: from environment)

    Returns:
        DevfileObj holding ``ctx`` and the decoded (flattened) document

    Raises:
        ContextError: Invalid content or unsupported version (unchanged)
        DecodeError: Structurally invalid document
        FetchError, OverrideError, MergeError, CycleError: Flattening failed
    """
    settings = settings or get_settings()
    decoder = decoder or YamlDocumentDecoder()

    ctx.validate(settings)
    document = decoder.decode(ctx.content, ctx.api_version)
    obj = DevfileObj(ctx=ctx, data=document)

    if flatten:
        loader = loader or DefaultContextLoader(settings)
        obj = ReferenceResolver(loader, decoder, settings).resolve(obj)
        logger.debug("flattened devfile %s", ctx.identity)
    return obj


def parse(
    path: PathLike,
    *,
    loader: Optional[ContextLoader] = None,
    decoder: Optional[DocumentDecoder] = None,
    settings: Optional[ParserSettings] = None,
) -> DevfileObj:
    """Parse and flatten the devfile at ``path``."""
    settings = settings or get_settings()
    loader = loader or DefaultContextLoader(settings)
    ctx = loader.load_from_path(path)
    return parse_devfile(ctx, True, loader=loader, decoder=decoder, settings=settings)


def parse_raw_devfile(
    path: PathLike,
    *,
    loader: Optional[ContextLoader] = None,
    decoder: Optional[DocumentDecoder] = None,
    settings: Optional[ParserSettings] = None,
) -> DevfileObj:
    """Parse the devfile at ``path`` without resolving parent or plugins."""
    settings = settings or get_settings()
    loader = loader or DefaultContextLoader(settings)
    ctx = loader.load_from_path(path)
    return parse_devfile(ctx, False, loader=loader, decoder=decoder, settings=settings)


def parse_from_url(
    url: str,
    *,
    loader: Optional[ContextLoader] = None,
    decoder: Optional[DocumentDecoder] = None,
    settings: Optional[ParserSettings] = None,
) -> DevfileObj:
    """Fetch, parse and flatten the devfile at ``url``."""
    settings = settings or get_settings()
    loader = loader or DefaultContextLoader(settings)
    ctx = loader.load_from_url(url)
    return parse_devfile(ctx, True, loader=loader, decoder=decoder, settings=settings)


def parse_from_data(
    data: bytes,
    *,
    loader: Optional[ContextLoader] = None,
    decoder: Optional[DocumentDecoder] = None,
    settings: Optional[ParserSettings] = None,
) -> DevfileObj:
    """Parse and flatten devfile content held in memory.

    Relative parent/plugin paths resolve against the working directory.
    """
    settings = settings or get_settings()
    loader = loader or DefaultContextLoader(settings)
    ctx = loader.load_from_bytes(data)
    return parse_devfile(ctx, True, loader=loader, decoder=decoder, settings=settings)
