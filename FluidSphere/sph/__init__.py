# -- SPH Engine Package -- #

'''
Core Smoothed Particle Hydrodynamics (SPH) engine.

Provides smoothing kernels, the particle system, neighbor search,
field estimation, force accumulation, time integration with a
spherical container, and the step driver.

Sean Bowman [10/17/2026]
'''

from FluidSphere.sph.protocols import SimulationConfig, SimulationState, SimulationConsistencyError
from FluidSphere.sph.kernels import Poly6Kernel, SpikyKernel, ViscosityKernel, KernelSet
from FluidSphere.sph.particles import ParticleSystem
from FluidSphere.sph.neighborSearch import NeighborPairs, createNeighborSearch
from FluidSphere.sph.sphSolver import SphSolver
