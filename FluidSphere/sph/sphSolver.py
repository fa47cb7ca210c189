# -- Spherical Container SPH Solver -- #

'''
Step driver for the Muller et al. (2003) SPH fluid in a sphere.

Each tick runs five full passes over the particle set, strictly in
order, each one finishing for every particle before the next begins:

    1. Density             (poly6 summation)
    2. Pressure            (linear equation of state)
    3. Color gradient      (poly6 radial derivative)
    4. Acceleration        (pressure + viscosity + surface tension + gravity)
    5. Velocity + position (symplectic Euler, spherical wall reflection)

The neighbor pairs are found once per tick from the positions left by
the previous tick. Every pass writes into fresh arrays (double
buffering), so no pass ever reads a value another particle already
updated in the same tick. The particle set is only modified after all
five passes succeed and the new state is finite; a failing tick raises
and leaves the set exactly as it was.

Time step is fixed (no CFL adaptation): the host supplies dt, or the
configured timeStep is used.

References:
-----------
Muller, Charypar & Gross (2003) -- Particle-Based Fluid Simulation
    for Interactive Applications

Sean Bowman [10/17/2026]
'''

from __future__ import annotations

import numpy as np

from FluidSphere.sph.protocols import (
    SimulationConfig,
    SimulationConsistencyError,
    SimulationState,
)
from FluidSphere.sph.kernels import KernelSet
from FluidSphere.sph.particles import ParticleSystem
from FluidSphere.sph.neighborSearch import NeighborSearch, NeighborPairs, createNeighborSearch
from FluidSphere.sph.fieldEstimator import FieldEstimator
from FluidSphere.sph.forces import ForceAccumulator
from FluidSphere.sph.boundaryHandling import SphericalContainer
from FluidSphere.sph.timeIntegration import SymplecticEuler


class SphSolver:
    '''
    Fixed-step SPH solver for a fluid inside a spherical container.

    The solver owns no particle state: the particle set is passed in
    on every call and is modified in place by step().

    Parameters:
    -----------
    config : SimulationConfig
        Simulation configuration (validated on construction)
    neighborSearch : NeighborSearch | None
        Neighbor search (defaults to config.neighborSearch)
    kernels : KernelSet | None
        Smoothing kernels (defaults to poly6 / spiky / viscosity)
    '''

    def __init__(
        self,
        config: SimulationConfig,
        neighborSearch: NeighborSearch | None = None,
        kernels: KernelSet | None = None,
    ) -> None:
        self._config = config.validate()
        self._kernels = kernels or KernelSet()
        self._neighborSearch = neighborSearch or createNeighborSearch(config.neighborSearch)
        self._estimator = FieldEstimator(config, self._kernels)
        self._forces = ForceAccumulator(config, self._estimator, self._kernels)
        self._container = SphericalContainer(
            radius=config.containerRadius,
            restitution=config.restitution,
            margin=config.boundaryMargin,
            strictContainment=config.strictContainment,
        )
        self._integrator = SymplecticEuler(self._container)

        self._time: float = 0.0
        self._step: int = 0
        self._dt: float = config.timeStep
        self._lastCollisions: int = 0

    ######################################################################
    # -- Initialization -- #
    ######################################################################

    def initialize(self, particles: ParticleSystem) -> None:
        '''
        Fill the derived fields of a freshly created particle set.

        Runs the density, pressure, and color-gradient passes on the
        current positions and commits them. Positions, velocities,
        time, and step count are left untouched.

        Parameters:
        -----------
        particles : ParticleSystem
            Particle set to prepare

        Raises:
        -------
        ValueError : If the set size differs from config.nParticles
        SimulationConsistencyError : If any density is invalid
        '''
        self._checkSize(particles)

        pairs = self._neighborSearch.findPairs(particles.positions, self._config.supportRadius)
        fields = self._estimator.estimate(particles.masses, pairs)

        particles.densities[:] = fields.densities
        particles.pressures[:] = fields.pressures
        particles.colorGradients[:] = fields.colorGradients

    def _checkSize(self, particles: ParticleSystem) -> None:
        '''Raise ValueError unless the set has config.nParticles particles.'''
        if particles.nParticles != self._config.nParticles:
            raise ValueError(
                f'Particle set has {particles.nParticles} particles, '
                f'configuration expects {self._config.nParticles}'
            )

    ######################################################################
    # -- Main Time Step -- #
    ######################################################################

    def step(self, particles: ParticleSystem, dt: float | None = None) -> None:
        '''
        Advance the particle set by one tick, in place.

        Parameters:
        -----------
        particles : ParticleSystem
            Particle set to advance
        dt : float | None
            Time step (defaults to config.timeStep)

        Raises:
        -------
        ValueError : If dt is not positive or the set size differs
            from config.nParticles
        SimulationConsistencyError : If the tick produces an invalid
            state; the particle set is left unchanged
        '''
        dt = self._config.timeStep if dt is None else dt
        if not dt > 0.0:
            raise ValueError(f'Time step must be positive, got {dt}')
        self._checkSize(particles)

        masses = particles.masses

        # Neighbor pairs from the previous tick's positions
        pairs = self._neighborSearch.findPairs(particles.positions, self._config.supportRadius)

        # 1-3. Density, pressure, color gradient
        fields = self._estimator.estimate(masses, pairs)

        # 4. Acceleration
        accelerations = self._forces.computeAccelerations(
            masses, particles.velocities, fields, pairs,
        )

        # 5. Velocity and position (with wall reflection)
        result = self._integrator.integrate(
            particles.positions, particles.velocities, accelerations, dt,
        )

        self._checkFinite('acceleration', accelerations)
        self._checkFinite('velocity', result.velocities)
        self._checkFinite('position', result.positions)

        # Commit the whole tick at once
        particles.densities[:] = fields.densities
        particles.pressures[:] = fields.pressures
        particles.colorGradients[:] = fields.colorGradients
        particles.accelerations[:] = accelerations
        particles.velocities[:] = result.velocities
        particles.positions[:] = result.positions

        self._lastCollisions = int(np.sum(result.colliding))
        self._dt = dt
        self._time += dt
        self._step += 1

    def run(self, particles: ParticleSystem, nSteps: int, dt: float | None = None) -> None:
        '''
        Advance the particle set by nSteps ticks.

        Parameters:
        -----------
        particles : ParticleSystem
            Particle set to advance
        nSteps : int
            Number of ticks
        dt : float | None
            Time step (defaults to config.timeStep)
        '''
        for _ in range(nSteps):
            self.step(particles, dt)

    def findNeighbors(self, particles: ParticleSystem) -> NeighborPairs:
        '''Neighbor pairs of the current particle positions.'''
        return self._neighborSearch.findPairs(particles.positions, self._config.supportRadius)

    @staticmethod
    def _checkFinite(name: str, values: np.ndarray) -> None:
        '''Raise SimulationConsistencyError if any value is not finite.'''
        bad = ~np.all(np.isfinite(values), axis=1)
        if np.any(bad):
            raise SimulationConsistencyError(
                f'{int(np.sum(bad))} particle(s) with non-finite {name} '
                f'(first: particle {int(np.argmax(bad))})'
            )

    ######################################################################
    # -- Diagnostics -- #
    ######################################################################

    def diagnostics(self, particles: ParticleSystem) -> SimulationState:
        '''
        Scalar diagnostics of the particle set after the last tick.

        Parameters:
        -----------
        particles : ParticleSystem
            Particle set last passed to step()

        Returns:
        --------
        SimulationState : Diagnostics snapshot
        '''
        return SimulationState(
            time=self._time,
            step=self._step,
            dt=self._dt,
            kineticEnergy=particles.kineticEnergy(),
            potentialEnergy=particles.potentialEnergy(self._config.gravity),
            maxVelocity=particles.maxSpeed(),
            minDensity=float(np.min(particles.densities)),
            maxDensity=float(np.max(particles.densities)),
            nColliding=self._lastCollisions,
            nOutside=self._container.countOutside(particles.positions),
        )

    ######################################################################
    # -- Properties -- #
    ######################################################################

    @property
    def config(self) -> SimulationConfig:
        '''Simulation configuration.'''
        return self._config

    @property
    def estimator(self) -> FieldEstimator:
        '''Field estimator used by the density and color passes.'''
        return self._estimator

    @property
    def forces(self) -> ForceAccumulator:
        '''Force accumulator used by the acceleration pass.'''
        return self._forces

    @property
    def container(self) -> SphericalContainer:
        '''Spherical container.'''
        return self._container

    @property
    def time(self) -> float:
        '''Simulated time.'''
        return self._time

    @property
    def stepCount(self) -> int:
        '''Number of completed ticks.'''
        return self._step

    @property
    def lastCollisions(self) -> int:
        '''Particles reflected by the wall during the last tick.'''
        return self._lastCollisions
