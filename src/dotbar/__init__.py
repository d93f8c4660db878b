"""dotbar - Live terminal dot progress bar for test runs."""

__version__ = "0.1.0"
__license__ = "GPL-3.0-or-later"

from dotbar.core.state import UnitResult
from dotbar.core.state import UnitStatus
from dotbar.reporter import DotReporter
from dotbar.reporter import HostSettings
from dotbar.reporter import RunSummary
from dotbar.utils.config import DotbarConfig


__all__ = [
    "DotReporter",
    "DotbarConfig",
    "HostSettings",
    "RunSummary",
    "UnitResult",
    "UnitStatus",
    "__version__",
]
