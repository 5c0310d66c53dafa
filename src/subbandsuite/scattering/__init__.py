"""scattering sub-package: subbands and alloy-disorder scattering rates."""

# Import modules themselves (allows: from subbandsuite.scattering import subband)
from . import subband
from . import typeado
from . import alloydisorder
from . import fileio
from . import ado

__all__ = [
    "subband",
    "typeado",
    "alloydisorder",
    "fileio",
    "ado",
]
