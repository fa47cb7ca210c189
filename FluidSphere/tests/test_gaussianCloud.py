# -- Gaussian Cloud Scenario Tests -- #

'''
Tests for the initial particle cloud.

Sean Bowman [10/17/2026]
'''

import numpy as np

from FluidSphere.sph.protocols import SimulationConfig
from FluidSphere.scenarios.gaussianCloud import createGaussianCloud


def testCloudFollowsConfig():
    config = SimulationConfig(nParticles=50, particleMass=2.5, seed=9)
    particles = createGaussianCloud(config)

    assert particles.nParticles == 50
    assert np.all(particles.masses == 2.5)
    assert np.all(particles.velocities == 0.0)
    assert np.all(particles.densities == 0.0)


def testSeedMakesCloudReproducible():
    config = SimulationConfig(nParticles=40, seed=3)

    assert np.array_equal(createGaussianCloud(config).positions, createGaussianCloud(config).positions)

    other = SimulationConfig(nParticles=40, seed=4)
    assert not np.array_equal(createGaussianCloud(config).positions, createGaussianCloud(other).positions)


def testExplicitGeneratorOverridesSeed():
    config = SimulationConfig(nParticles=20, seed=3)
    positions = createGaussianCloud(config, rng=np.random.default_rng(77)).positions

    expected = np.random.default_rng(77).normal(0.0, config.initialSpread, size=(20, 3))
    np.testing.assert_array_equal(positions, expected)


def testSpreadIsPerAxisStandardDeviation():
    config = SimulationConfig(nParticles=4000, initialSpread=2.0, seed=1)
    positions = createGaussianCloud(config).positions

    np.testing.assert_allclose(np.std(positions, axis=0), 2.0, rtol=0.05)
    np.testing.assert_allclose(np.mean(positions, axis=0), 0.0, atol=0.15)
