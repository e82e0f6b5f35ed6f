"""Recursive resolution of parent and plugin references.

Each referenced document is loaded, validated, decoded and itself fully
resolved before its content is overridden and merged. The locations on the
active resolution path are tracked so a reference back into that path fails
with CycleError instead of recursing forever.
"""

import logging
from typing import TYPE_CHECKING, List, Optional

from .errors import CycleError, DevfileError, ResolutionDepthError
from .merge import merge_workspace_content
from .model import Document, PluginComponent, Reference, WorkspaceContent
from .overrides import apply_overrides

if TYPE_CHECKING:
    from devfile_parser._internal.context import DevfileContext
    from devfile_parser.contracts import ContextLoader, DevfileObj, DocumentDecoder
    from devfile_parser.settings import ParserSettings

logger = logging.getLogger(__name__)


class ReferenceResolver:
    """Flattens a devfile by resolving its parent and plugin references.

    A resolver holds no state between calls; every resolve() starts a new
    resolution path.
    """

    def __init__(self, loader: "ContextLoader", decoder: "DocumentDecoder", settings: "ParserSettings"):
        self.loader = loader
        self.decoder = decoder
        self.settings = settings

    def resolve(self, obj: "DevfileObj") -> "DevfileObj":
        """Return a new DevfileObj whose document has no outstanding references."""
        from devfile_parser.contracts import DevfileObj

        document = self.resolve_document(obj.data, obj.ctx, [obj.ctx.identity])
        return DevfileObj(ctx=obj.ctx, data=document)

    def resolve_document(self, document: Document, ctx: "DevfileContext", active: List[str]) -> Document:
        """Resolve ``document`` (loaded from ``ctx``) given the active path."""
        parent_content: Optional[WorkspaceContent] = None
        if document.parent is not None and document.parent.is_set:
            parent_content = self._resolve_reference(
                document.parent, ctx, active, f"parent {document.parent.uri}"
            )

        plugin_contents: List[WorkspaceContent] = []
        plugin_labels: List[str] = []
        for component in document.components:
            variant = component.variant
            if not isinstance(variant, PluginComponent):
                continue
            plugin_labels.append(f"plugin '{component.name}'")
            if not variant.is_set:
                logger.debug("plugin component '%s' has no uri; it contributes nothing", component.name)
                try:
                    plugin_contents.append(apply_overrides(WorkspaceContent(), variant.overrides))
                except DevfileError as e:
                    e.add_frame(f"plugin '{component.name}'")
                    raise
                continue
            plugin_contents.append(
                self._resolve_reference(variant, ctx, active, f"plugin '{component.name}' {variant.uri}")
            )

        if parent_content is None and not plugin_labels and document.parent is None:
            return document

        merged = merge_workspace_content(
            document.workspace_content().without_plugins(),
            parent_content,
            plugin_contents,
            plugin_labels=plugin_labels,
        )
        return document.with_workspace_content(merged)

    def _resolve_reference(
        self, reference: Reference, ctx: "DevfileContext", active: List[str], frame: str
    ) -> WorkspaceContent:
        try:
            kind, location = ctx.reference_location(reference.uri)
            self._check_path(active, location)

            child_ctx = self._load(kind, location)
            child_ctx.validate(self.settings)
            child = self.decoder.decode(child_ctx.content, child_ctx.api_version)
            child = self.resolve_document(child, child_ctx, active + [location])

            logger.debug("adding data of devfile with URI: %s", reference.uri)
            return apply_overrides(child.workspace_content(), reference.overrides)
        except DevfileError as e:
            e.add_frame(frame)
            raise

    def _check_path(self, active: List[str], location: str) -> None:
        if location in active:
            start = active.index(location)
            raise CycleError(active[start:] + [location])
        if len(active) > self.settings.max_reference_depth:
            raise ResolutionDepthError(active + [location], self.settings.max_reference_depth)

    def _load(self, kind: str, location: str) -> "DevfileContext":
        if kind == "url":
            return self.loader.load_from_url(location)
        return self.loader.load_from_path(location)
