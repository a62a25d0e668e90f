__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'argvex'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .disaggregator import *
from .faults import *
from .parser import *
from .runner import *
from .results import *
from .shapes import *
from .specs import *
from .stream import *
from .table import *
from .validator import *

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
    "__path__",
    "__title__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of every submodule
__all__ += disaggregator.__all__  # type: ignore[attr-defined]
__all__ += faults.__all__  # type: ignore[attr-defined]
__all__ += parser.__all__  # type: ignore[attr-defined]
__all__ += runner.__all__  # type: ignore[attr-defined]
__all__ += results.__all__  # type: ignore[attr-defined]
__all__ += shapes.__all__  # type: ignore[attr-defined]
__all__ += specs.__all__  # type: ignore[attr-defined]
__all__ += stream.__all__  # type: ignore[attr-defined]
__all__ += table.__all__  # type: ignore[attr-defined]
__all__ += validator.__all__  # type: ignore[attr-defined]
