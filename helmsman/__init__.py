__title__ = 'helmsman'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.1.0"

import logging

from .application import *
from .builder import *
from .commands import *
from .converters import *
from .definitions import *
from .faults import *
from .help import *
from .middleware import *
from .output import *
from .parsing import *
from .registry import *
from .routing import *
from .validation import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 1, 0, "final", 0, "")

# Library code never configures logging; hosts attach their own handlers.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = (
    "__title__",
    "__license__",
    "__version__",
    "version_info"
)

__all__ += application.__all__  # type: ignore[attr-defined]
__all__ += builder.__all__  # type: ignore[attr-defined]
__all__ += commands.__all__  # type: ignore[attr-defined]
__all__ += converters.__all__  # type: ignore[attr-defined]
__all__ += definitions.__all__  # type: ignore[attr-defined]
__all__ += faults.__all__  # type: ignore[attr-defined]
__all__ += help.__all__  # type: ignore[attr-defined]
__all__ += middleware.__all__  # type: ignore[attr-defined]
__all__ += output.__all__  # type: ignore[attr-defined]
__all__ += parsing.__all__  # type: ignore[attr-defined]
__all__ += registry.__all__  # type: ignore[attr-defined]
__all__ += routing.__all__  # type: ignore[attr-defined]
__all__ += validation.__all__  # type: ignore[attr-defined]

del logging
