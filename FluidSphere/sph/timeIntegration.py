# -- SPH Time Integration Schemes -- #

'''
Time integration for the SPH particle system.

Implements the Symplectic Euler (semi-implicit Euler) integrator with
the container collision resolved between the velocity and position
updates:

    v <- v + a * dt                (kick)
    v <- container reflection(v)   (collision, outward movers only)
    x <- x + v * dt                (drift, using the updated velocity)

The drift uses the *updated* velocity, which is what makes the
scheme symplectic and keeps the long-run energy drift bounded.

References:
-----------
Monaghan (2005) -- Smoothed Particle Hydrodynamics
Hairer et al. (2003) -- Geometric Numerical Integration

Sean Bowman [10/17/2026]
'''

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import numpy as np

from FluidSphere.sph.boundaryHandling import SphericalContainer


@dataclass(frozen=True)
class IntegrationResult:
    '''
    New kinematic state produced by one integration step.

    Parameters:
    -----------
    positions : np.ndarray
        Updated positions, shape (N, 3)
    velocities : np.ndarray
        Updated velocities, shape (N, 3)
    colliding : np.ndarray
        Particles reflected by the container this step, shape (N,)
    '''

    positions: np.ndarray
    velocities: np.ndarray
    colliding: np.ndarray


######################################################################
# -- Time Integrator Protocol -- #
######################################################################

class TimeIntegrator(Protocol):
    '''Protocol for time integration schemes.'''

    def integrate(
        self,
        positions: np.ndarray,
        velocities: np.ndarray,
        accelerations: np.ndarray,
        dt: float,
    ) -> IntegrationResult:
        '''
        Advance positions and velocities by one time step.

        Input arrays are not modified.
        '''
        ...


######################################################################
# -- Symplectic Euler Integrator -- #
######################################################################

class SymplecticEuler:
    '''
    Symplectic (semi-implicit) Euler integrator with wall collisions.

    Parameters:
    -----------
    container : SphericalContainer | None
        Container resolved between kick and drift (None = unbounded)
    '''

    def __init__(self, container: SphericalContainer | None = None) -> None:
        self._container = container

    def integrate(
        self,
        positions: np.ndarray,
        velocities: np.ndarray,
        accelerations: np.ndarray,
        dt: float,
    ) -> IntegrationResult:
        '''
        Advance all particles by one time step.

        Parameters:
        -----------
        positions : np.ndarray
            Positions from the previous tick, shape (N, 3)
        velocities : np.ndarray
            Velocities from the previous tick, shape (N, 3)
        accelerations : np.ndarray
            Accelerations of this tick, shape (N, 3)
        dt : float
            Time step size

        Returns:
        --------
        IntegrationResult : New positions, velocities, and collision mask
        '''
        # Kick
        newVelocities = velocities + accelerations * dt

        if self._container is not None:
            newVelocities, colliding = self._container.reflectVelocities(positions, newVelocities)
        else:
            colliding = np.zeros(len(positions), dtype=bool)

        # Drift with the updated velocity
        newPositions = positions + newVelocities * dt
        if self._container is not None:
            newPositions = self._container.containPositions(newPositions)

        return IntegrationResult(
            positions=newPositions,
            velocities=newVelocities,
            colliding=colliding,
        )
