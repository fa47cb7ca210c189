# -- Gaussian Cloud Scenario -- #

'''
Initial particle cloud for the spherical container.

Samples every coordinate of every particle independently from a
normal distribution centered on the container (mean 0), with zero
initial velocity and equal masses. The cloud is dense near the center
and expands under its own pressure until it meets the wall.

Sampling is a one-time setup step; the solver never draws random
numbers.

Sean Bowman [10/17/2026]
'''

from __future__ import annotations

import numpy as np

from FluidSphere.sph.protocols import SimulationConfig
from FluidSphere.sph.particles import ParticleSystem


def createGaussianCloud(
    config: SimulationConfig,
    rng: np.random.Generator | None = None,
) -> ParticleSystem:
    '''
    Create the initial particle set for a run.

    Parameters:
    -----------
    config : SimulationConfig
        Provides nParticles, initialSpread (standard deviation),
        particleMass, and seed
    rng : np.random.Generator | None
        Random generator (defaults to one seeded with config.seed)

    Returns:
    --------
    ParticleSystem : nParticles particles at rest
    '''
    if rng is None:
        rng = np.random.default_rng(config.seed)

    positions = rng.normal(
        loc=0.0,
        scale=config.initialSpread,
        size=(config.nParticles, 3),
    )

    return ParticleSystem.fromPositions(positions, mass=config.particleMass)
