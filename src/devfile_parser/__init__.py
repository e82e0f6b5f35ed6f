"""devfile_parser: load devfiles and flatten their parent and plugin references."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("devfile-parser")
except PackageNotFoundError:
    __version__ = "dev"

# Public API exports
from devfile_parser.api import parse, parse_from_url, parse_from_data, parse_raw_devfile
from devfile_parser.contracts import DevfileObj
from devfile_parser.codes import ErrorCode
from devfile_parser.kernel.errors import (
    DevfileError,
    ContextError,
    DecodeError,
    FetchError,
    OverrideError,
    MergeError,
    CycleError,
    DevfileValidationError,
)
from devfile_parser.kernel.filters import DevfileOptions

__all__ = [
    "__version__",
    "parse",
    "parse_from_url",
    "parse_from_data",
    "parse_raw_devfile",
    "DevfileObj",
    "DevfileOptions",
    "ErrorCode",
    "DevfileError",
    "ContextError",
    "DecodeError",
    "FetchError",
    "OverrideError",
    "MergeError",
    "CycleError",
    "DevfileValidationError",
]
