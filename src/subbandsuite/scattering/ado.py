"""
Command-line driver: alloy-disorder scattering rates.

Reads the subband data of a structure from the working directory
(``E<p>.r``, ``wf_<p><i>.r``, ``Ef.r``, ``N.r``), the alloy profile
(``x.r``) and the list of wanted transitions (``rrp.r``), then writes the
rate against initial energy for each transition (``ado<i><f>.r``) and the
weighted mean rates (``ado-avg.dat``).

Usage
-----
$ subbandsuite-ado -T 77 --Ecutoff 50 --nki 201
"""

import argparse
import sys

from subbandsuite.core.constants import angstrom, me0, meV
from subbandsuite.libsubbandsuite import logger

from . import fileio
from .alloydisorder import calculate_rates
from .typeado import ReadADOParams, ado

log = logger.get_logger(__name__)


def configure_options(argv=None):
    """Parse the command line."""
    parser = argparse.ArgumentParser(
        prog="subbandsuite-ado",
        description="Find the alloy disorder scattering rate.",
    )
    parser.add_argument("-S", "--noblocking", action="store_true",
                        help="Disable final-state blocking.")
    parser.add_argument("--Vad", type=float, default=None,
                        help="Alloy disorder potential [meV] (default: 600)")
    parser.add_argument("--cellfraction", type=float, default=None,
                        help="Fraction of unit cell occupied by each scatterer (default: 4)")
    parser.add_argument("--latticeconst", type=float, default=None,
                        help="Lattice constant in growth direction [angstrom] (default: 5.65)")
    parser.add_argument("-m", "--mass", type=float, default=None,
                        help="Band-edge effective mass relative to free electron (default: 0.067)")
    parser.add_argument("-p", "--particle", choices=["e", "h", "l"], default=None,
                        help="Particle ID: 'e', 'h' or 'l' for electrons, heavy holes or "
                             "light holes respectively (default: e)")
    parser.add_argument("-T", "--temperature", type=float, default=None,
                        help="Temperature of carrier distribution [K] (default: 300)")
    parser.add_argument("--Ecutoff", type=float, default=None,
                        help="Cut-off energy for carrier distribution [meV]. "
                             "If not specified, then 5kT above band-edge.")
    parser.add_argument("--nki", type=int, default=None,
                        help="Number of initial wave-vector samples (default: 101)")
    parser.add_argument("--params", default=None,
                        help="Parameter file; command-line options override its values.")
    parser.add_argument("--workers", type=int, default=1,
                        help="Number of transitions evaluated concurrently (default: 1)")
    parser.add_argument("-v", "--verbosity", type=int, default=2, choices=range(7),
                        help="Log verbosity, 0 (errors only) to 6 (default: 2)")
    return parser.parse_args(argv)


def params_from_options(opt):
    """Build the run parameters from parsed options (user units -> SI)."""
    params = ReadADOParams(opt.params) if opt.params else ado()

    changes = {}
    if opt.Vad is not None:
        changes["Vad"] = opt.Vad * meV
    if opt.cellfraction is not None:
        changes["cellfraction"] = opt.cellfraction
    if opt.latticeconst is not None:
        changes["latticeconst"] = opt.latticeconst * angstrom
    if opt.mass is not None:
        changes["mass"] = opt.mass * me0
    if opt.particle is not None:
        changes["particle"] = opt.particle
    if opt.temperature is not None:
        changes["T"] = opt.temperature
    if opt.Ecutoff is not None:
        changes["Ecutoff"] = opt.Ecutoff * meV
    if opt.nki is not None:
        changes["nki"] = opt.nki
    if opt.noblocking:
        changes["blocking"] = False

    return params.with_changes(**changes)


def main(argv=None):
    """Run the alloy-disorder calculation; returns the process exit status."""
    opt = configure_options(argv)
    logger.setup(opt.verbosity)

    params = params_from_options(opt)
    p = params.particle

    subbands = fileio.read_subbands(f"E{p}.r", f"wf_{p}", ".r", "N.r", "Ef.r", mass=params.mass)
    z, x = fileio.read_table("x.r", ncols=2)
    transitions = fileio.read_transitions("rrp.r")

    def _report(i, f, exc):
        log.error("Transition %d->%d failed: %s", i, f, exc)

    results = calculate_rates(subbands, transitions, z, x, params,
                              max_workers=opt.workers, on_error=_report)

    done = [r for r in results if r is not None]
    for result in done:
        fileio.write_rate_table(fileio.rate_table_filename(result), result)
    fileio.write_average_rates("ado-avg.dat", done)

    return 0 if len(done) == len(results) else 1


if __name__ == "__main__":
    sys.exit(main())
