"""Merge inherited and local workspace content into one.

Layers are combined in the order parent, plugins (declaration order), local.
An element whose key appears in several layers is kept once if every
definition is identical; differing definitions raise MergeError. The same
rule holds for components, commands and projects.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .errors import MergeError
from .model import SECTION_KEYS, WIRE_DUMP_OPTIONS, WorkspaceContent

logger = logging.getLogger(__name__)

_SINGULAR = {"components": "component", "commands": "command", "projects": "project"}


def merge_workspace_content(
    local: WorkspaceContent,
    parent: Optional[WorkspaceContent] = None,
    plugins: Sequence[WorkspaceContent] = (),
    plugin_labels: Optional[Sequence[str]] = None,
) -> WorkspaceContent:
    """
    Merge parent, plugin and local content.

    Args:
        local: The document's own content (plugin components already removed)
        parent: Content inherited from the parent, if any
        plugins: Content contributed by each plugin, in declaration order
        plugin_labels: Names used for plugin layers in error messages

    Returns:
        New WorkspaceContent; inputs are not modified

    Raises:
        MergeError: If two layers define the same key with different content
    """
    labels = list(plugin_labels) if plugin_labels is not None else [f"plugin #{i + 1}" for i in range(len(plugins))]
    layers: List[Tuple[str, WorkspaceContent]] = []
    if parent is not None:
        layers.append(("parent", parent))
    layers.extend(zip(labels, plugins))
    layers.append(("local", local))

    merged: Dict[str, List[Any]] = {}
    for section, key_attr in SECTION_KEYS.items():
        kept: List[Any] = []
        seen: Dict[str, Tuple[str, Dict[str, Any]]] = {}  # key -> (layer label, wire form)
        for label, content in layers:
            for element in getattr(content, section):
                key = getattr(element, key_attr)
                wire = element.model_dump(**WIRE_DUMP_OPTIONS)
                if key in seen:
                    first_label, first_wire = seen[key]
                    if first_wire != wire:
                        raise MergeError(_SINGULAR[section], key, [first_label, label])
                    logger.debug("identical %s '%s' in %s and %s kept once", section, key, first_label, label)
                    continue
                seen[key] = (label, wire)
                kept.append(element)
        merged[section] = kept

    logger.debug(
        "merged %d layer(s): %d components, %d commands, %d projects",
        len(layers), len(merged["components"]), len(merged["commands"]), len(merged["projects"]),
    )
    return WorkspaceContent(**merged)
