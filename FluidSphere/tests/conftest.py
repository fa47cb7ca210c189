# -- Shared Test Fixtures -- #

'''
Fixtures shared across the FluidSphere tests.

Sean Bowman [10/17/2026]
'''

import numpy as np
import pytest

from FluidSphere.sph.protocols import SimulationConfig
from FluidSphere.scenarios.gaussianCloud import createGaussianCloud


@pytest.fixture
def tinyConfig():
    '''Seeded 60-particle configuration that runs in well under a second.'''
    return SimulationConfig(nParticles=60, nSteps=5, initialSpread=3.0, seed=11)


@pytest.fixture
def tinyCloud(tinyConfig):
    '''Gaussian cloud for tinyConfig.'''
    return createGaussianCloud(tinyConfig)


@pytest.fixture
def quietConfig():
    '''Configuration with only the pressure force active.'''
    return SimulationConfig(viscosity=0.0, surfaceTension=0.0, gravity=0.0)


@pytest.fixture
def randomPositions():
    '''300 seeded positions with a spread comparable to the support radius.'''
    rng = np.random.default_rng(1234)
    return rng.normal(0.0, 5.0, size=(300, 3))
