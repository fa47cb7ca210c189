# -- Field Estimator Tests -- #

'''
Tests for the density, pressure, and color-field passes.

Sean Bowman [10/17/2026]
'''

import math

import numpy as np
import pytest

from FluidSphere.sph.protocols import SimulationConfig, SimulationConsistencyError
from FluidSphere.sph.kernels import Poly6Kernel
from FluidSphere.sph.particles import ParticleSystem
from FluidSphere.sph.neighborSearch import BruteForceSearch
from FluidSphere.sph.fieldEstimator import FieldEstimator


def _pairsFor(positions, config):
    return BruteForceSearch().findPairs(np.asarray(positions, dtype=float), config.supportRadius)


def testLoneParticleDensityAndPressure():
    '''An isolated particle only sees itself: rho = m W(0), P = k (rho - rho_0).'''
    config = SimulationConfig()
    estimator = FieldEstimator(config)
    pairs = _pairsFor([[0.0, 0.0, 0.0]], config)

    fields = estimator.estimate(np.array([1.0]), pairs)

    w0 = 315.0 / (64.0 * math.pi * config.supportRadius ** 3)
    assert fields.densities[0] == pytest.approx(w0, rel=1e-14)
    assert fields.pressures[0] == pytest.approx(config.gasConstant * (w0 - config.restDensity), rel=1e-12)
    np.testing.assert_array_equal(fields.colorGradients[0], 0.0)


def testDensityScalesWithMass():
    config = SimulationConfig()
    estimator = FieldEstimator(config)
    pairs = _pairsFor([[0.0, 0.0, 0.0]], config)

    light = estimator.computeDensity(np.array([1.0]), pairs)
    heavy = estimator.computeDensity(np.array([3.0]), pairs)
    assert heavy[0] == pytest.approx(3.0 * light[0])


def testPairDensityIncludesNeighbor():
    config = SimulationConfig()
    estimator = FieldEstimator(config)
    pairs = _pairsFor([[0.0, 0.0, 0.0], [4.0, 0.0, 0.0]], config)

    densities = estimator.computeDensity(np.ones(2), pairs)

    poly6 = Poly6Kernel()
    expected = poly6.evaluate(np.zeros(3), 12.0) + poly6.evaluate(np.array([4.0, 0.0, 0.0]), 12.0)
    np.testing.assert_allclose(densities, [expected, expected], rtol=1e-14)


def testDensitiesPositiveForCloud(tinyConfig, tinyCloud):
    estimator = FieldEstimator(tinyConfig)
    pairs = _pairsFor(tinyCloud.positions, tinyConfig)

    densities = estimator.computeDensity(tinyCloud.masses, pairs)

    w0 = Poly6Kernel().evaluate(np.zeros(3), tinyConfig.supportRadius)
    assert np.all(densities >= w0 * tinyConfig.particleMass)


def testNegativePressureBelowRestDensity():
    config = SimulationConfig(restDensity=1.0)
    pressures = FieldEstimator(config).computePressure(np.array([0.5, 1.0, 2.0]))
    np.testing.assert_allclose(pressures, [-50.0, 0.0, 100.0])


@pytest.mark.parametrize('badValue', [0.0, -1.0, np.nan, np.inf])
def testCheckDensitiesRejectsInvalid(badValue):
    with pytest.raises(SimulationConsistencyError):
        FieldEstimator.checkDensities(np.array([1.0, badValue, 2.0]))


def testColorGradientPointsOutOfFluid():
    '''For a pair, each gradient points away from the other particle.'''
    config = SimulationConfig()
    estimator = FieldEstimator(config)
    masses = np.ones(2)
    pairs = _pairsFor([[0.0, 0.0, 0.0], [4.0, 0.0, 0.0]], config)

    densities = estimator.computeDensity(masses, pairs)
    gradients = estimator.computeColorGradient(masses, densities, pairs)

    assert gradients[0, 0] < 0.0
    np.testing.assert_allclose(gradients[0], -gradients[1], rtol=1e-14)
    np.testing.assert_array_equal(gradients[:, 1:], 0.0)


def testColorGradientVanishesAtLatticeCenter():
    config = SimulationConfig()
    estimator = FieldEstimator(config)
    particles = ParticleSystem.createLattice(5, 4.0)
    pairs = _pairsFor(particles.positions, config)

    densities = estimator.computeDensity(particles.masses, pairs)
    gradients = estimator.computeColorGradient(particles.masses, densities, pairs)

    center = 62
    np.testing.assert_array_equal(particles.positions[center], 0.0)
    scale = np.max(np.linalg.norm(gradients, axis=1))
    np.testing.assert_allclose(gradients[center], 0.0, atol=1e-12 * scale)


def testColorFieldOfLoneParticleIsOne():
    config = SimulationConfig()
    estimator = FieldEstimator(config)
    masses = np.array([2.0])
    pairs = _pairsFor([[1.0, 1.0, 1.0]], config)

    densities = estimator.computeDensity(masses, pairs)
    colorField = estimator.computeColorField(masses, densities, pairs)
    assert colorField[0] == pytest.approx(1.0)


def testColorDivergenceIsVector():
    config = SimulationConfig()
    estimator = FieldEstimator(config)
    masses = np.ones(2)
    pairs = _pairsFor([[0.0, 0.0, 0.0], [4.0, 0.0, 0.0]], config)

    densities = estimator.computeDensity(masses, pairs)
    gradients = estimator.computeColorGradient(masses, densities, pairs)
    divergence = estimator.computeColorDivergence(masses, densities, gradients, pairs)

    assert divergence.shape == (2, 3)
    assert np.linalg.norm(divergence[0]) > 0.0
