# -- FluidSphere Package -- #

'''
Particle-based fluid in a spherical container, simulated with
Smoothed Particle Hydrodynamics (SPH) after Muller et al. (2003).

A Gaussian cloud of particles spreads, settles under weak gravity,
and sloshes against a reflecting spherical wall. Includes the SPH
engine, scenario setup, a command-line runner, JSON frame export,
and Plotly diagnostics.

Sean Bowman [10/17/2026]
'''

__version__ = '0.1.0'

from FluidSphere.runner import FluidSphereRunner
from FluidSphere.sph.protocols import SimulationConfig
from FluidSphere.sph.sphSolver import SphSolver
from FluidSphere.export.frameExporter import FrameExporter
