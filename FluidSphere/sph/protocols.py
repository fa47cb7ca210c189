# -- SPH Simulation Protocols -- #

'''
Configuration, diagnostics, and error types for the spherical SPH fluid.

Defines the core data structures (SimulationConfig, SimulationState),
the internal-consistency error raised when a tick produces an invalid
state, and the solver protocol the step driver satisfies.

Sean Bowman [10/17/2026]
'''

from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from typing import Protocol, TYPE_CHECKING

from FluidSphere import constants as const

if TYPE_CHECKING:
    from FluidSphere.sph.particles import ParticleSystem
    from FluidSphere.sph.neighborSearch import NeighborPairs


NEIGHBOR_SEARCH_TYPES = ('bruteForce', 'hashGrid', 'kdTree')


######################################################################
# -- Errors -- #
######################################################################

class SimulationConsistencyError(RuntimeError):
    '''
    Raised when a tick produces a state that cannot be integrated.

    A non-positive or non-finite density, or a non-finite acceleration,
    velocity, or position, means the run was mis-parameterized (for
    example a zero support radius or a zero mass). The tick is
    abandoned without committing anything and the simulation halts.
    '''


######################################################################
# -- Simulation Configuration -- #
######################################################################

@dataclass(frozen=True)
class SimulationConfig:
    '''
    Configuration for a spherical-container SPH simulation.

    Immutable for the duration of a run. Defaults come from
    FluidSphere.constants.

    Parameters:
    -----------
    nParticles : int
        Number of particles N
    supportRadius : float
        Kernel support radius h
    restDensity : float
        Rest density rho_0 of the equation of state
    gasConstant : float
        Stiffness k in p = k * (rho - rho_0)
    viscosity : float
        Dynamic viscosity mu
    surfaceTension : float
        Surface tension coefficient sigma
    containerRadius : float
        Radius R of the spherical container
    gravity : float
        Gravity magnitude g (force (0, -g, 0) * m)
    restitution : float
        Restitution coefficient e applied on wall bounces
    timeStep : float
        Fixed time step per tick
    boundaryMargin : float
        Collision band width: collide when |x| >= R - boundaryMargin
    particleMass : float
        Mass of each particle at creation
    initialSpread : float
        Per-axis standard deviation of the initial Gaussian cloud
    seed : int | None
        Seed for the initial sampling (None = nondeterministic)
    nSteps : int
        Number of ticks for a CLI run
    outputInterval : int
        Record a frame every outputInterval ticks
    neighborSearch : str
        'bruteForce', 'hashGrid', or 'kdTree'
    strictContainment : bool
        Project escaped particles back inside the container after
        each drift (off by default, see boundaryHandling)
    '''

    nParticles: int = const.nParticles
    supportRadius: float = const.supportRadius
    restDensity: float = const.restDensity
    gasConstant: float = const.gasConstant
    viscosity: float = const.viscosity
    surfaceTension: float = const.surfaceTension
    containerRadius: float = const.containerRadius
    gravity: float = const.gravity
    restitution: float = const.restitution
    timeStep: float = const.timeStep
    boundaryMargin: float = const.boundaryMargin
    particleMass: float = const.particleMass
    initialSpread: float = const.initialSpread
    seed: int | None = None
    nSteps: int = const.nSteps
    outputInterval: int = const.outputInterval
    neighborSearch: str = const.defaultNeighborSearch
    strictContainment: bool = False

    def validate(self) -> SimulationConfig:
        '''
        Check the configuration for parameterization errors.

        Returns:
        --------
        SimulationConfig : self, for chaining

        Raises:
        -------
        ValueError : If any parameter is out of range
        '''
        if self.nParticles <= 0:
            raise ValueError(f'nParticles must be positive, got {self.nParticles}')
        if not self.supportRadius > 0.0:
            raise ValueError(f'supportRadius must be positive, got {self.supportRadius}')
        if not self.particleMass > 0.0:
            raise ValueError(f'particleMass must be positive, got {self.particleMass}')
        if not self.containerRadius > self.boundaryMargin:
            raise ValueError(
                f'containerRadius ({self.containerRadius}) must exceed '
                f'boundaryMargin ({self.boundaryMargin})'
            )
        if self.boundaryMargin < 0.0:
            raise ValueError(f'boundaryMargin must be non-negative, got {self.boundaryMargin}')
        if not self.timeStep > 0.0:
            raise ValueError(f'timeStep must be positive, got {self.timeStep}')
        if not 0.0 <= self.restitution <= 1.0:
            raise ValueError(f'restitution must lie in [0, 1], got {self.restitution}')
        for name in ('gasConstant', 'viscosity', 'surfaceTension', 'initialSpread'):
            if getattr(self, name) < 0.0:
                raise ValueError(f'{name} must be non-negative, got {getattr(self, name)}')
        if self.nSteps < 0:
            raise ValueError(f'nSteps must be non-negative, got {self.nSteps}')
        if self.outputInterval <= 0:
            raise ValueError(f'outputInterval must be positive, got {self.outputInterval}')
        if self.neighborSearch not in NEIGHBOR_SEARCH_TYPES:
            raise ValueError(
                f'Unknown neighbor search: {self.neighborSearch} '
                f'(expected one of {", ".join(NEIGHBOR_SEARCH_TYPES)})'
            )
        return self

    def toDict(self) -> dict:
        '''Plain-dict form of the configuration (JSON serializable).'''
        return asdict(self)

    ######################################################################
    # -- Presets -- #
    ######################################################################

    @classmethod
    def reference(cls) -> SimulationConfig:
        '''
        Reference run: 1000 particles in a radius-40 sphere.

        ~1M neighbor candidates per tick with brute-force search.
        '''
        return cls()

    @classmethod
    def small(cls) -> SimulationConfig:
        '''
        Small run for quick checks.

        200 particles, 100 ticks, runs in seconds.
        '''
        return cls(nParticles=200, nSteps=100, initialSpread=3.0)

    @classmethod
    def fromJson(cls, configPath: str) -> SimulationConfig:
        '''
        Load configuration from a JSON file.

        Reads the 'simulation', 'sph', 'fluid', and 'container'
        sections. Missing keys fall back to the defaults.

        Parameters:
        -----------
        configPath : str
            Path to the JSON configuration file

        Returns:
        --------
        SimulationConfig : Loaded (unvalidated) configuration
        '''
        with open(configPath, 'r') as f:
            data = json.load(f)

        simSection = data.get('simulation', {})
        sphSection = data.get('sph', {})
        fluidSection = data.get('fluid', {})
        containerSection = data.get('container', {})

        return cls(
            nParticles=simSection.get('nParticles', const.nParticles),
            timeStep=simSection.get('timeStep', const.timeStep),
            nSteps=simSection.get('nSteps', const.nSteps),
            outputInterval=simSection.get('outputInterval', const.outputInterval),
            seed=simSection.get('seed', None),
            initialSpread=simSection.get('initialSpread', const.initialSpread),
            supportRadius=sphSection.get('supportRadius', const.supportRadius),
            neighborSearch=sphSection.get('neighborSearch', const.defaultNeighborSearch),
            restDensity=fluidSection.get('restDensity', const.restDensity),
            gasConstant=fluidSection.get('gasConstant', const.gasConstant),
            viscosity=fluidSection.get('viscosity', const.viscosity),
            surfaceTension=fluidSection.get('surfaceTension', const.surfaceTension),
            gravity=fluidSection.get('gravity', const.gravity),
            particleMass=fluidSection.get('particleMass', const.particleMass),
            containerRadius=containerSection.get('radius', const.containerRadius),
            restitution=containerSection.get('restitution', const.restitution),
            boundaryMargin=containerSection.get('margin', const.boundaryMargin),
            strictContainment=containerSection.get('strictContainment', False),
        )


######################################################################
# -- Simulation State -- #
######################################################################

@dataclass
class SimulationState:
    '''
    Snapshot of scalar diagnostics after a tick.

    Parameters:
    -----------
    time : float
        Simulated time
    step : int
        Number of completed ticks
    dt : float
        Time step of the last tick
    kineticEnergy : float
        Total kinetic energy
    potentialEnergy : float
        Total gravitational potential energy (height = y)
    maxVelocity : float
        Largest particle speed
    minDensity : float
        Smallest particle density
    maxDensity : float
        Largest particle density
    nColliding : int
        Particles reflected by the container during the last tick
    nOutside : int
        Particles currently beyond the container radius
    '''

    time: float
    step: int
    dt: float
    kineticEnergy: float
    potentialEnergy: float
    maxVelocity: float
    minDensity: float
    maxDensity: float
    nColliding: int
    nOutside: int

    @property
    def totalEnergy(self) -> float:
        '''Total mechanical energy (KE + PE).'''
        return self.kineticEnergy + self.potentialEnergy


######################################################################
# -- Solver Protocol -- #
######################################################################

class SphSolverProtocol(Protocol):
    '''Protocol for SPH step drivers.'''

    def initialize(self, particles: ParticleSystem) -> None:
        '''Fill the derived fields of a fresh particle set.'''
        ...

    def findNeighbors(self, particles: ParticleSystem) -> NeighborPairs:
        '''Neighbor pairs of the current particle positions.'''
        ...

    def step(self, particles: ParticleSystem, dt: float | None = None) -> None:
        '''Advance the particle set by one tick, in place.'''
        ...

    def diagnostics(self, particles: ParticleSystem) -> SimulationState:
        '''Diagnostics snapshot for the given particle set.'''
        ...
