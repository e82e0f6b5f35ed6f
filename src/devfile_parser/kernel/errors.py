"""Exception hierarchy for devfile parsing and flattening."""

from typing import Any, Dict, List, Optional

from devfile_parser.codes import ErrorCode


class DevfileError(Exception):
    """Base exception for devfile parsing and flattening errors.

    ``trail`` records the chain of references (outermost last) that led to
    the failing document, so a failure three plugins deep can be located.
    """

    code: ErrorCode = ErrorCode.DECODE_FAILED

    def __init__(
        self,
        message: str,
        *,
        uri: Optional[str] = None,
        element: Optional[str] = None,
        code: Optional[ErrorCode] = None,
    ):
        self.message = message
        self.uri = uri
        self.element = element
        self.trail: List[str] = []
        if code is not None:
            self.code = code
        super().__init__(message)

    def add_frame(self, frame: str) -> None:
        """Record that this error surfaced while resolving ``frame``."""
        self.trail.append(frame)

    def __str__(self) -> str:
        if not self.trail:
            return self.message
        return self.message + "".join(f"\n  while resolving {frame}" for frame in self.trail)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "code": self.code.value,
            "error": self.__class__.__name__,
            "message": self.message,
            "uri": self.uri,
            "element": self.element,
            "trail": list(self.trail),
        }


class ContextError(DevfileError):
    """Raised for an invalid source location or unsupported schema version."""
    code = ErrorCode.INVALID_CONTEXT


class DecodeError(DevfileError):
    """Raised when document content is structurally invalid."""
    code = ErrorCode.DECODE_FAILED

    PREFIX = "failed to decode devfile content"

    def __init__(self, cause: Any, **kwargs: Any):
        super().__init__(f"{self.PREFIX}: {cause}", **kwargs)


class FetchError(DevfileError):
    """Raised when a parent or plugin URI cannot be read."""
    code = ErrorCode.FETCH_FAILED


class OverrideError(DevfileError):
    """Raised when an override names an element absent from its target."""
    code = ErrorCode.OVERRIDE_TARGET_MISSING


class MergeError(DevfileError):
    """Raised when two layers define the same element with different content."""
    code = ErrorCode.MERGE_CONFLICT

    def __init__(self, section: str, key: str, layers: List[str]):
        self.section = section
        self.key = key
        self.layers = layers
        super().__init__(
            f"{section} '{key}' is defined with conflicting content in {' and '.join(layers)}; "
            f"use overrides to change inherited {section}",
            element=key,
        )


class CycleError(DevfileError):
    """Raised when a reference reappears on the active resolution path."""
    code = ErrorCode.CYCLE_DETECTED

    def __init__(self, cycle: List[str]):
        self.cycle = cycle
        cycle_str = " -> ".join(cycle)
        super().__init__(f"Cycle detected in devfile references:\n  Cycle: {cycle_str}", uri=cycle[-1])


class ResolutionDepthError(CycleError):
    """Raised when nested references exceed the configured depth."""
    code = ErrorCode.DEPTH_EXCEEDED

    def __init__(self, chain: List[str], max_depth: int):
        self.max_depth = max_depth
        DevfileError.__init__(
            self,
            f"Reference depth exceeds limit of {max_depth}: {' -> '.join(chain)}",
            uri=chain[-1],
        )
        self.cycle = chain


class DevfileValidationError(DevfileError):
    """Raised by deterministic local checks such as clonePath rules."""
    code = ErrorCode.INVALID_CLONE_PATH
