# -- Integrator and Container Tests -- #

'''
Tests for the symplectic Euler update and the spherical wall.

Sean Bowman [10/17/2026]
'''

import numpy as np
import pytest

from FluidSphere.sph.boundaryHandling import SphericalContainer
from FluidSphere.sph.timeIntegration import SymplecticEuler


DT = 0.04


def _integrate(container, position, velocity, acceleration=(0.0, 0.0, 0.0)):
    integrator = SymplecticEuler(container)
    return integrator.integrate(
        np.array([position], dtype=float),
        np.array([velocity], dtype=float),
        np.array([acceleration], dtype=float),
        DT,
    )


def testKickThenDriftUsesNewVelocity():
    result = _integrate(None, [1.0, 2.0, 3.0], [0.0, 1.0, 0.0], acceleration=[0.0, -10.0, 0.0])

    np.testing.assert_allclose(result.velocities[0], [0.0, 1.0 - 10.0 * DT, 0.0])
    np.testing.assert_allclose(result.positions[0], [1.0, 2.0 + (1.0 - 10.0 * DT) * DT, 3.0])
    assert not result.colliding[0]


def testOutwardMoverAtWallIsReflected():
    container = SphericalContainer(radius=40.0, restitution=0.8, margin=1.0)
    result = _integrate(container, [39.5, 0.0, 0.0], [10.0, 0.0, 0.0])

    assert result.colliding[0]
    np.testing.assert_allclose(result.velocities[0], [-8.0, 0.0, 0.0])
    np.testing.assert_allclose(result.positions[0], [39.5 - 8.0 * DT, 0.0, 0.0])


def testInwardMoverAtWallIsUntouched():
    container = SphericalContainer(radius=40.0, restitution=0.8, margin=1.0)
    result = _integrate(container, [39.5, 0.0, 0.0], [-10.0, 0.0, 0.0])

    assert not result.colliding[0]
    np.testing.assert_array_equal(result.velocities[0], [-10.0, 0.0, 0.0])


def testOutwardMoverAwayFromWallIsUntouched():
    container = SphericalContainer(radius=40.0, restitution=0.8, margin=1.0)
    result = _integrate(container, [30.0, 0.0, 0.0], [10.0, 0.0, 0.0])

    assert not result.colliding[0]
    np.testing.assert_array_equal(result.velocities[0], [10.0, 0.0, 0.0])


def testObliqueReflectionKeepsTangentialComponent():
    container = SphericalContainer(radius=40.0, restitution=1.0, margin=1.0)
    result = _integrate(container, [0.0, 39.5, 0.0], [3.0, 4.0, 0.0])

    np.testing.assert_allclose(result.velocities[0], [3.0, -4.0, 0.0])
    assert np.linalg.norm(result.velocities[0]) == pytest.approx(5.0)


def testStrictContainmentProjectsEscapees():
    '''A fast tangential mover leaves the sphere unless containment is strict.'''
    loose = SphericalContainer(radius=40.0, margin=1.0)
    strict = SphericalContainer(radius=40.0, margin=1.0, strictContainment=True)

    escaped = _integrate(loose, [39.5, 0.0, 0.0], [0.0, 500.0, 0.0])
    assert loose.countOutside(escaped.positions) == 1

    contained = _integrate(strict, [39.5, 0.0, 0.0], [0.0, 500.0, 0.0])
    assert strict.countOutside(contained.positions) == 0
    assert np.linalg.norm(contained.positions[0]) == pytest.approx(39.0)


def testInputsAreNotModified():
    container = SphericalContainer(radius=40.0)
    positions = np.array([[39.5, 0.0, 0.0], [0.0, 0.0, 0.0]])
    velocities = np.array([[10.0, 0.0, 0.0], [1.0, 1.0, 1.0]])
    accelerations = np.ones((2, 3))

    SymplecticEuler(container).integrate(positions, velocities, accelerations, DT)

    np.testing.assert_array_equal(positions, [[39.5, 0.0, 0.0], [0.0, 0.0, 0.0]])
    np.testing.assert_array_equal(velocities, [[10.0, 0.0, 0.0], [1.0, 1.0, 1.0]])


def testParticleAtCenterNeverCollides():
    container = SphericalContainer(radius=40.0)
    mask = container.collidingMask(np.zeros((1, 3)), np.array([[5.0, 0.0, 0.0]]))
    assert not mask[0]
