"""
Exception and warning types shared by the subbandsuite modules.

The domain errors derive from the built-in exception they specialise, so
callers that only catch ``ValueError``/``RuntimeError`` keep working.
"""


class InsufficientSamples(ValueError):
    """Too few samples for the requested numerical rule."""


class InvalidPopulation(ValueError):
    """Subband population is zero or negative."""


class NoRealSolution(ValueError):
    """Nonparabolic dispersion has no real energy at the given wavevector."""


class NegativeEnergy(ValueError):
    """A kinetic energy below the subband minimum was requested or produced."""


class KinematicInconsistency(RuntimeError):
    """Energy-conserving final wavevector is imaginary or NaN.

    Raised from inside the wavevector sampling loop, where the kinematic
    bounds have already been validated; it always indicates bad upstream
    data or configuration.
    """


class CutoffTooNarrow(UserWarning):
    """Cut-off energy excluded every allowed transition and was widened."""
