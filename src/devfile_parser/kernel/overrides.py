"""Apply override directives to inherited workspace content.

Overrides are applied on the wire form of each element:
- Objects are merged recursively; a ``null`` value removes the key
- Lists of named objects (env, endpoints, volumeMounts, ...) are merged by
  ``name``; other lists are replaced
- ``"$patch": "delete"`` on an element removes it

Every override must target an existing element, and may not change the
element's kind. Inputs are never mutated.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from devfile_parser.codes import ErrorCode
from .errors import OverrideError
from .model import (
    COMMAND_KINDS,
    COMPONENT_KINDS,
    PROJECT_SOURCE_KINDS,
    OverrideSet,
    WorkspaceContent,
)

logger = logging.getLogger(__name__)

PATCH_DIRECTIVE = "$patch"

_SECTION_KINDS: Dict[str, Tuple[str, ...]] = {
    "components": COMPONENT_KINDS,
    "commands": COMMAND_KINDS,
    "projects": PROJECT_SOURCE_KINDS,
}


def strategic_merge(base: Dict[str, Any], patch: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``patch`` onto ``base`` without mutating either.

    ``"$patch"`` directives are never copied into the result, at any depth.

    Example:
        >>> strategic_merge({"a": 1, "b": {"c": 2}}, {"b": {"d": 3}, "a": None})
        {'b': {'c': 2, 'd': 3}}
    """
    result: Dict[str, Any] = dict(base)
    for key, value in patch.items():
        if key == PATCH_DIRECTIVE:
            continue
        if value is None:
            result.pop(key, None)
        elif key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = strategic_merge(result[key], value)
        elif key in result and isinstance(result[key], list) and isinstance(value, list):
            result[key] = merge_named_lists(result[key], value)
        elif isinstance(value, dict):
            result[key] = strategic_merge({}, value)
        else:
            result[key] = value
    return result


def _is_named_list(items: List[Any]) -> bool:
    return bool(items) and all(isinstance(i, dict) and "name" in i for i in items)


def merge_named_lists(base: List[Any], patch: List[Any]) -> List[Any]:
    """Merge lists of named objects by name; replace any other list.

    Example:
        >>> merge_named_lists([{"name": "a", "v": 1}], [{"name": "a", "v": 2}, {"name": "b"}])
        [{'name': 'a', 'v': 2}, {'name': 'b'}]
        >>> merge_named_lists([1, 2], [3])
        [3]
    """
    if not (_is_named_list(base) and _is_named_list(patch)):
        return list(patch)
    patches = {item["name"]: item for item in patch}
    merged = []
    for item in base:
        item_patch = patches.pop(item["name"], None)
        if item_patch is None:
            merged.append(item)
        elif item_patch.get(PATCH_DIRECTIVE) != "delete":
            merged.append(strategic_merge(item, _strip_directive(item_patch)))
    merged.extend(strategic_merge({}, p) for p in patches.values() if p.get(PATCH_DIRECTIVE) != "delete")
    return merged


def _strip_directive(patch: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in patch.items() if k != PATCH_DIRECTIVE}


def _patch_element(element: Dict[str, Any], patch: Dict[str, Any], section: str, key: str) -> Dict[str, Any]:
    kinds = _SECTION_KINDS[section]
    element_kind = next((k for k in kinds if k in element), None)
    patch_kinds = [k for k in kinds if k in patch]
    for patch_kind in patch_kinds:
        if patch_kind != element_kind:
            raise OverrideError(
                f"{section} override '{key}' changes its kind from '{element_kind}' to '{patch_kind}'",
                element=key,
                code=ErrorCode.OVERRIDE_INVALID,
            )
    return strategic_merge(element, _strip_directive(patch))


def check_override_targets(content: WorkspaceContent, overrides: OverrideSet) -> None:
    """Raise OverrideError for the first override that names no existing element."""
    for section, key_attr, elements in content.sections():
        existing = {getattr(e, key_attr) for e in elements}
        for key in overrides.patches(section):
            if key not in existing:
                raise OverrideError(
                    f"{section} override '{key}' does not match any element of the overridden content",
                    element=key,
                )


def apply_overrides(content: WorkspaceContent, overrides: Optional[OverrideSet]) -> WorkspaceContent:
    """Return a copy of ``content`` with ``overrides`` applied.

    Args:
        content: Inherited workspace content (not modified)
        overrides: Override set, or None

    Returns:
        New WorkspaceContent

    Raises:
        OverrideError: If an override names a missing element, changes an
            element's kind, or produces an invalid element
    """
    if overrides is None or overrides.is_empty:
        return content.model_copy(deep=True)

    check_override_targets(content, overrides)

    wire = content.to_wire()
    patched: Dict[str, List[Dict[str, Any]]] = {}
    for section, key_attr, _ in content.sections():
        patches = overrides.patches(section)
        items = []
        for element in wire.get(section, []):
            key = element[key_attr]
            patch = patches.get(key)
            if patch is None:
                items.append(element)
            elif patch.get(PATCH_DIRECTIVE) == "delete":
                logger.debug("override removes %s '%s'", section, key)
            else:
                logger.debug("override patches %s '%s'", section, key)
                items.append(_patch_element(element, patch, section, key))
        patched[section] = items

    try:
        return WorkspaceContent.model_validate(patched)
    except ValidationError as e:
        raise OverrideError(f"overrides produce invalid content: {e}", code=ErrorCode.OVERRIDE_INVALID) from e
