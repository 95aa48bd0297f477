__title__ = 'sextant'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .arguments import *
from .faults import *
from .parser import *
from .shell import *
from .wrapping import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__title__",
    "__license__",
    "__version__",
    "version_info"
)

# Argument kinds (Arity, Flag, Option, Positional)
__all__ += arguments.__all__  # type: ignore[attr-defined]
# Declaration errors, parse errors and warnings
__all__ += faults.__all__  # type: ignore[attr-defined]
# Parser, handles and outcomes
__all__ += parser.__all__  # type: ignore[attr-defined]
# Shell runner
__all__ += shell.__all__  # type: ignore[attr-defined]
# Text wrapping
__all__ += wrapping.__all__  # type: ignore[attr-defined]
