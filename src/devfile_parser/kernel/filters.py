"""Attribute-based selection of devfile elements."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, TypeVar

T = TypeVar("T")


@dataclass
class DevfileOptions:
    """Options for selecting devfile elements.

    ``filter`` maps attribute keys to the value an element must carry; an
    element is selected only if it matches every entry.
    """
    filter: Dict[str, Any] = field(default_factory=dict)


def filter_devfile_object(attributes: Optional[Mapping[str, Any]], options: Optional[DevfileOptions]) -> bool:
    """Return True if ``attributes`` satisfy every key of ``options.filter``.

    Args:
        attributes: Element attributes (may be None)
        options: Selection options; None or an empty filter selects everything

    Returns:
        Whether the element is selected
    """
    if options is None or not options.filter:
        return True
    attributes = attributes or {}
    for key, wanted in options.filter.items():
        if key not in attributes or attributes[key] != wanted:
            return False
    return True


def filter_elements(elements: List[T], options: Optional[DevfileOptions]) -> List[T]:
    """Select the elements whose ``attributes`` match ``options``, keeping order."""
    return [e for e in elements if filter_devfile_object(getattr(e, "attributes", None), options)]
