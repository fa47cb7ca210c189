# -- Particle System Tests -- #

'''
Tests for ParticleSystem construction, copies, and diagnostics.

Sean Bowman [10/17/2026]
'''

import numpy as np
import pytest

from FluidSphere.sph.particles import ParticleSystem


def testFromPositionsDefaults():
    particles = ParticleSystem.fromPositions(np.ones((4, 3)), mass=2.0)

    assert particles.nParticles == 4
    assert np.all(particles.masses == 2.0)
    assert np.all(particles.velocities == 0.0)
    assert particles.colorGradients.shape == (4, 3)
    assert particles.densities.shape == (4,)


def testRejectsBadShapes():
    with pytest.raises(ValueError):
        ParticleSystem.fromPositions(np.zeros((3, 2)))
    with pytest.raises(ValueError):
        ParticleSystem.fromPositions(np.zeros((3, 3)), velocities=np.zeros((2, 3)))
    with pytest.raises(ValueError):
        ParticleSystem.fromPositions(np.zeros((0, 3)))


def testRejectsNonPositiveMass():
    with pytest.raises(ValueError):
        ParticleSystem.fromPositions(np.zeros((2, 3)), mass=0.0)
    with pytest.raises(ValueError):
        ParticleSystem.fromPositions(np.zeros((2, 3)), mass=np.array([1.0, -1.0]))


def testSnapshotIsIndependent():
    particles = ParticleSystem.fromPositions(np.arange(6.0).reshape(2, 3))
    copy = particles.snapshot()

    particles.positions[0, 0] = 99.0
    particles.densities[1] = 5.0

    assert copy.positions[0, 0] == 0.0
    assert copy.densities[1] == 0.0


def testLatticeIsCentered():
    particles = ParticleSystem.createLattice(3, 2.0)

    assert particles.nParticles == 27
    np.testing.assert_allclose(particles.centerOfMass(), 0.0, atol=1e-15)
    assert np.any(np.all(particles.positions == 0.0, axis=1))
    assert particles.radialDistances().max() == pytest.approx(np.sqrt(12.0))


def testEnergyDiagnostics():
    particles = ParticleSystem.fromPositions(
        [[0.0, 2.0, 0.0], [0.0, -1.0, 0.0]],
        velocities=[[3.0, 0.0, 4.0], [0.0, 0.0, 0.0]],
        mass=2.0,
    )

    assert particles.kineticEnergy() == pytest.approx(0.5 * 2.0 * 25.0)
    assert particles.potentialEnergy(0.1) == pytest.approx(2.0 * 0.1 * (2.0 - 1.0))
    assert particles.maxSpeed() == pytest.approx(5.0)
