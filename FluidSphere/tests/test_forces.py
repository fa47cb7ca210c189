# -- Force Accumulator Tests -- #

'''
Tests for the pressure, viscosity, surface tension, and gravity forces.

Sean Bowman [10/17/2026]
'''

import numpy as np
import pytest

from FluidSphere.sph.protocols import SimulationConfig
from FluidSphere.sph.kernels import Poly6Kernel
from FluidSphere.sph.particles import ParticleSystem
from FluidSphere.sph.neighborSearch import BruteForceSearch
from FluidSphere.sph.fieldEstimator import FieldEstimator
from FluidSphere.sph.forces import ForceAccumulator


def _setup(config, positions, velocities=None):
    particles = ParticleSystem.fromPositions(positions, velocities=velocities, mass=config.particleMass)
    pairs = BruteForceSearch().findPairs(particles.positions, config.supportRadius)
    estimator = FieldEstimator(config)
    fields = estimator.estimate(particles.masses, pairs)
    return particles, pairs, fields, ForceAccumulator(config, estimator)


def testPressurePairIsEqualAndOpposite(quietConfig):
    particles, pairs, fields, forces = _setup(quietConfig, [[0.0, 0.0, 0.0], [4.0, 0.0, 0.0]])

    accelerations = forces.computeAccelerations(particles.masses, particles.velocities, fields, pairs)

    # Compressed above rest density, so the pair repels
    assert fields.pressures[0] > 0.0
    assert accelerations[0, 0] < 0.0
    np.testing.assert_allclose(accelerations[0], -accelerations[1], rtol=1e-14)
    np.testing.assert_array_equal(accelerations[:, 1:], 0.0)


def testLoneParticleFeelsNoPressure(quietConfig):
    particles, pairs, fields, forces = _setup(quietConfig, [[5.0, -2.0, 1.0]])

    pressure = forces.pressureForce(particles.masses, fields, pairs)
    np.testing.assert_array_equal(pressure, 0.0)


def testSymmetricLatticeCenterIsBalanced(quietConfig):
    '''The center of a symmetric at-rest lattice feels no net force.'''
    particles = ParticleSystem.createLattice(7, 4.0)
    pairs = BruteForceSearch().findPairs(particles.positions, quietConfig.supportRadius)
    estimator = FieldEstimator(quietConfig)
    fields = estimator.estimate(particles.masses, pairs)
    forces = ForceAccumulator(quietConfig, estimator)

    accelerations = forces.computeAccelerations(particles.masses, particles.velocities, fields, pairs)

    center = 171
    np.testing.assert_array_equal(particles.positions[center], 0.0)
    np.testing.assert_allclose(accelerations[center], 0.0, atol=1e-9)


def testViscosityDampsRelativeMotion():
    config = SimulationConfig(viscosity=0.5, surfaceTension=0.0, gravity=0.0)
    particles, pairs, fields, forces = _setup(
        config,
        [[0.0, 0.0, 0.0], [4.0, 0.0, 0.0]],
        velocities=[[1.0, 0.0, 0.0], [-1.0, 0.0, 0.0]],
    )

    viscous = forces.viscosityForce(particles.masses, particles.velocities, fields, pairs)

    assert viscous[0, 0] < 0.0
    np.testing.assert_allclose(viscous[0], -viscous[1], rtol=1e-14)


def testViscosityIgnoresUniformMotion():
    config = SimulationConfig(viscosity=0.5)
    particles, pairs, fields, forces = _setup(
        config,
        [[0.0, 0.0, 0.0], [4.0, 0.0, 0.0], [0.0, 3.0, 0.0]],
        velocities=np.tile([2.0, -1.0, 0.5], (3, 1)),
    )

    viscous = forces.viscosityForce(particles.masses, particles.velocities, fields, pairs)
    np.testing.assert_array_equal(viscous, 0.0)


def testSurfaceTensionPullsPairTogether():
    config = SimulationConfig(viscosity=0.0, surfaceTension=50.0, gravity=0.0)
    particles, pairs, fields, forces = _setup(config, [[0.0, 0.0, 0.0], [4.0, 0.0, 0.0]])

    tension = forces.surfaceTensionForce(particles.masses, fields, pairs)

    assert tension[0, 0] > 0.0
    assert tension[1, 0] < 0.0


def testSurfaceTensionZeroWithoutGradient():
    config = SimulationConfig(surfaceTension=50.0)
    particles, pairs, fields, forces = _setup(config, [[0.0, 0.0, 0.0]])

    tension = forces.surfaceTensionForce(particles.masses, fields, pairs)
    assert np.all(np.isfinite(tension))
    np.testing.assert_array_equal(tension, 0.0)


def testGravityActsAlongNegativeY():
    config = SimulationConfig(gravity=0.1)
    gravity = ForceAccumulator(config).gravityForce(np.array([1.0, 2.0]))
    np.testing.assert_allclose(gravity, [[0.0, -0.1, 0.0], [0.0, -0.2, 0.0]])


def testAccelerationIsForceOverDensity():
    '''A lone particle accelerates at -g m / rho along y.'''
    config = SimulationConfig(gravity=0.1)
    particles, pairs, fields, forces = _setup(config, [[0.0, 0.0, 0.0]])

    accelerations = forces.computeAccelerations(particles.masses, particles.velocities, fields, pairs)

    w0 = Poly6Kernel().evaluate(np.zeros(3), config.supportRadius)
    assert accelerations[0, 1] == pytest.approx(-0.1 / w0)
    assert accelerations[0, 0] == 0.0
    assert accelerations[0, 2] == 0.0
