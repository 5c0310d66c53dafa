"""libsubbandsuite sub-package for numerical utilities, errors and logging."""

# Import modules themselves (allows: from subbandsuite.libsubbandsuite import integrator)
from . import errors
from . import integrator
from . import logger

__all__ = [
    "errors",
    "integrator",
    "logger",
]
