# -- SPH Particle System -- #

'''
Dataclass holding the state of every fluid particle.

Stores positions, velocities, accelerations, masses, densities,
pressures, and color-field gradients as contiguous NumPy arrays so
each solver pass runs over the whole set at once. The set has a fixed
size for its lifetime: particles are never inserted or removed while
the simulation runs.

Sean Bowman [10/17/2026]
'''

from __future__ import annotations

from dataclasses import dataclass, fields

import numpy as np


@dataclass
class ParticleSystem:
    '''
    SPH particle system state.

    Vector quantities have shape (nParticles, 3); scalar quantities
    have shape (nParticles,). Derived fields (densities, pressures,
    colorGradients) are rewritten by the solver every tick.

    Parameters:
    -----------
    positions : np.ndarray
        Particle positions, shape (N, 3)
    velocities : np.ndarray
        Particle velocities, shape (N, 3)
    accelerations : np.ndarray
        Accelerations from the last tick, shape (N, 3)
    masses : np.ndarray
        Particle masses (all positive), shape (N,)
    densities : np.ndarray
        Densities from the last tick, shape (N,)
    pressures : np.ndarray
        Pressures from the last tick (may be negative), shape (N,)
    colorGradients : np.ndarray
        Color-field gradients from the last tick, shape (N, 3)
    '''

    positions: np.ndarray
    velocities: np.ndarray
    accelerations: np.ndarray
    masses: np.ndarray
    densities: np.ndarray
    pressures: np.ndarray
    colorGradients: np.ndarray

    def __post_init__(self) -> None:
        for f in fields(self):
            setattr(self, f.name, np.asarray(getattr(self, f.name), dtype=float))

        n = self.positions.shape[0] if self.positions.ndim == 2 else -1
        if n <= 0 or self.positions.shape != (n, 3):
            raise ValueError(f'positions must have shape (N, 3) with N > 0, got {self.positions.shape}')

        for name in ('velocities', 'accelerations', 'colorGradients'):
            if getattr(self, name).shape != (n, 3):
                raise ValueError(f'{name} must have shape ({n}, 3), got {getattr(self, name).shape}')
        for name in ('masses', 'densities', 'pressures'):
            if getattr(self, name).shape != (n,):
                raise ValueError(f'{name} must have shape ({n},), got {getattr(self, name).shape}')

        if not np.all(self.masses > 0.0):
            raise ValueError('All particle masses must be positive')

    @property
    def nParticles(self) -> int:
        '''Number of particles (fixed at creation).'''
        return self.positions.shape[0]

    def snapshot(self) -> ParticleSystem:
        '''
        Independent deep copy of the particle state.

        Readers that need a stable view while the next tick runs
        (renderers, exporters) must copy before calling step().

        Returns:
        --------
        ParticleSystem : Copy sharing no arrays with this system
        '''
        return ParticleSystem(**{f.name: getattr(self, f.name).copy() for f in fields(self)})

    ######################################################################
    # -- Diagnostics -- #
    ######################################################################

    def kineticEnergy(self) -> float:
        '''
        Total kinetic energy.

        KE = (1/2) * sum_i m_i * |v_i|^2

        Returns:
        --------
        float : Kinetic energy
        '''
        speedsSq = np.sum(self.velocities * self.velocities, axis=1)
        return float(0.5 * np.sum(self.masses * speedsSq))

    def potentialEnergy(self, gravity: float) -> float:
        '''
        Total gravitational potential energy, height = y, zero at y = 0.

        Parameters:
        -----------
        gravity : float
            Gravity magnitude (acting along -y)

        Returns:
        --------
        float : Potential energy
        '''
        return float(np.sum(self.masses * gravity * self.positions[:, 1]))

    def maxSpeed(self) -> float:
        '''Largest particle speed.'''
        return float(np.max(np.linalg.norm(self.velocities, axis=1)))

    def radialDistances(self) -> np.ndarray:
        '''Distance of each particle from the container center, shape (N,).'''
        return np.linalg.norm(self.positions, axis=1)

    def centerOfMass(self) -> np.ndarray:
        '''Mass-weighted mean position, shape (3,).'''
        return np.sum(self.positions * self.masses[:, np.newaxis], axis=0) / np.sum(self.masses)

    ######################################################################
    # -- Factories -- #
    ######################################################################

    @classmethod
    def fromPositions(
        cls,
        positions: np.ndarray,
        velocities: np.ndarray | None = None,
        mass: float | np.ndarray = 1.0,
    ) -> ParticleSystem:
        '''
        Create a particle system from explicit positions.

        Derived fields start at zero and are filled in by the first
        tick.

        Parameters:
        -----------
        positions : np.ndarray
            Particle positions, shape (N, 3)
        velocities : np.ndarray | None
            Initial velocities, shape (N, 3) (default zero)
        mass : float | np.ndarray
            Scalar mass for all particles, or per-particle masses (N,)

        Returns:
        --------
        ParticleSystem : New particle system
        '''
        positions = np.array(positions, dtype=float)
        n = positions.shape[0]
        if velocities is None:
            velocities = np.zeros((n, 3))

        return cls(
            positions=positions,
            velocities=np.array(velocities, dtype=float),
            accelerations=np.zeros((n, 3)),
            masses=np.broadcast_to(np.asarray(mass, dtype=float), (n,)).copy(),
            densities=np.zeros(n),
            pressures=np.zeros(n),
            colorGradients=np.zeros((n, 3)),
        )

    @classmethod
    def createLattice(
        cls,
        nPerAxis: int,
        spacing: float,
        mass: float = 1.0,
    ) -> ParticleSystem:
        '''
        Create an at-rest cubic lattice centered on the origin.

        With an odd nPerAxis one particle sits exactly at the origin
        and the lattice is symmetric about it.

        Parameters:
        -----------
        nPerAxis : int
            Particles along each axis
        spacing : float
            Lattice spacing
        mass : float
            Particle mass

        Returns:
        --------
        ParticleSystem : Lattice of nPerAxis^3 particles
        '''
        coords = (np.arange(nPerAxis) - (nPerAxis - 1) / 2.0) * spacing
        xx, yy, zz = np.meshgrid(coords, coords, coords, indexing='ij')
        positions = np.column_stack([xx.ravel(), yy.ravel(), zz.ravel()])
        return cls.fromPositions(positions, mass=mass)
