"""
subbandsuite: carrier transport in confined semiconductor structures.

This package represents quantized 2D carrier subbands (dispersion,
Fermi-Dirac statistics and envelope wavefunctions) and computes
alloy-disorder scattering rates between them.
"""

# Import main sub-packages
from . import core
from . import libsubbandsuite
from . import scattering

__all__ = [
    "core",
    "libsubbandsuite",
    "scattering",
]
