# -- Spherical Container Boundary -- #

'''
Collision handling against a spherical container of radius R.

A particle is colliding during a tick when it sits within the margin
band of the wall (|x| >= R - margin) *and* moves outward (x . v > 0).
Its velocity is then mirrored about the inward wall normal
-x/|x| and scaled by the restitution coefficient:

    v <- (v - 2 (v . n) n) * e,     n = -x / |x|

Particles in the band that already move inward are left alone so they
can re-enter the domain before another reflection is considered.

Positions are not clamped by default: a particle may sit briefly
beyond R when one reflection does not fully turn it around. That is
part of the model's dynamics. Hosts that need hard containment can
enable strictContainment, which projects escaped particles back onto
the sphere of radius R - margin after the drift.

Sean Bowman [10/17/2026]
'''

from __future__ import annotations

import numpy as np


class SphericalContainer:
    '''
    Reflecting spherical wall centered on the origin.

    Parameters:
    -----------
    radius : float
        Container radius R
    restitution : float
        Fraction of speed kept after a bounce (default 0.8)
    margin : float
        Width of the collision band inside the wall (default 1.0)
    strictContainment : bool
        Project particles beyond R back inside after each drift
    '''

    def __init__(
        self,
        radius: float,
        restitution: float = 0.8,
        margin: float = 1.0,
        strictContainment: bool = False,
    ) -> None:
        self._radius = radius
        self._restitution = restitution
        self._margin = margin
        self._strictContainment = strictContainment

    @property
    def radius(self) -> float:
        '''Container radius R.'''
        return self._radius

    @property
    def restitution(self) -> float:
        '''Restitution coefficient e.'''
        return self._restitution

    def collidingMask(self, positions: np.ndarray, velocities: np.ndarray) -> np.ndarray:
        '''
        Particles colliding with the wall this tick.

        Parameters:
        -----------
        positions : np.ndarray
            Particle positions, shape (N, 3)
        velocities : np.ndarray
            Particle velocities (after the kick), shape (N, 3)

        Returns:
        --------
        np.ndarray : Boolean mask, shape (N,)
        '''
        nearWall = np.linalg.norm(positions, axis=1) >= self._radius - self._margin
        movingOut = np.sum(positions * velocities, axis=1) > 0.0
        return nearWall & movingOut

    def reflectVelocities(
        self, positions: np.ndarray, velocities: np.ndarray,
    ) -> tuple[np.ndarray, np.ndarray]:
        '''
        Reflect outward-moving velocities of particles at the wall.

        Parameters:
        -----------
        positions : np.ndarray
            Particle positions, shape (N, 3)
        velocities : np.ndarray
            Particle velocities (after the kick), shape (N, 3)

        Returns:
        --------
        tuple[np.ndarray, np.ndarray] :
            (new velocities, colliding mask); input arrays are not modified
        '''
        colliding = self.collidingMask(positions, velocities)
        newVelocities = velocities.copy()
        if not np.any(colliding):
            return (newVelocities, colliding)

        pos = positions[colliding]
        vel = velocities[colliding]

        # Inward unit normal; colliding particles have |x| > 0
        normals = -pos / np.linalg.norm(pos, axis=1)[:, np.newaxis]
        vDotN = np.sum(vel * normals, axis=1)
        reflected = vel - 2.0 * vDotN[:, np.newaxis] * normals

        newVelocities[colliding] = reflected * self._restitution
        return (newVelocities, colliding)

    def containPositions(self, positions: np.ndarray) -> np.ndarray:
        '''
        Apply the optional hard containment to drifted positions.

        Returns the positions unchanged unless strictContainment is
        enabled, in which case particles beyond R are projected onto
        the sphere of radius R - margin.

        Parameters:
        -----------
        positions : np.ndarray
            Positions after the drift, shape (N, 3)

        Returns:
        --------
        np.ndarray : Contained positions (a new array when modified)
        '''
        if not self._strictContainment:
            return positions

        distances = np.linalg.norm(positions, axis=1)
        outside = distances > self._radius
        if not np.any(outside):
            return positions

        contained = positions.copy()
        scale = (self._radius - self._margin) / distances[outside]
        contained[outside] = positions[outside] * scale[:, np.newaxis]
        return contained

    def countOutside(self, positions: np.ndarray) -> int:
        '''Number of particles beyond the container radius.'''
        return int(np.sum(np.linalg.norm(positions, axis=1) > self._radius))
