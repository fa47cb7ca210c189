# -- SPH Force Accumulator -- #

'''
Pressure, viscosity, surface tension, and gravity forces.

Consumes the field estimates of the current tick and returns the
net acceleration of every particle:

    F_pressure_p = -sum_i n(x_p - x_i) * m_i * (P_p + P_i) / (2 rho_i)
                        * dW_spiky(x_p - x_i)
    F_viscosity_p = sum_i (v_i - v_p) * mu * m_i / rho_i
                        * lapW_visc(x_p - x_i)
    F_surface_p  = n(c_p) * (-sigma * |div_p|)
    F_gravity_p  = (0, -g, 0) * m_p

    a_p = (F_pressure + F_viscosity + F_surface + F_gravity) / rho_p

The symmetric pressure average (P_p + P_i) / 2 makes the pair force
equal and opposite for particles of equal mass and density, even
though each particle evaluates its own sum.

References:
-----------
Muller, Charypar & Gross (2003) -- Particle-Based Fluid Simulation
    for Interactive Applications

Sean Bowman [10/17/2026]
'''

from __future__ import annotations

import numpy as np

from FluidSphere.sph.protocols import SimulationConfig
from FluidSphere.sph.kernels import KernelSet
from FluidSphere.sph.neighborSearch import NeighborPairs
from FluidSphere.sph.fieldEstimator import FieldEstimator, SphFields


class ForceAccumulator:
    '''
    Computes per-particle forces and accelerations.

    Parameters:
    -----------
    config : SimulationConfig
        Simulation configuration (h, mu, sigma, g)
    estimator : FieldEstimator | None
        Estimator used for the color divergence (defaults to one
        built from config and kernels)
    kernels : KernelSet | None
        Kernels to use (defaults to the standard set)
    '''

    def __init__(
        self,
        config: SimulationConfig,
        estimator: FieldEstimator | None = None,
        kernels: KernelSet | None = None,
    ) -> None:
        self._config = config
        self._kernels = kernels or KernelSet()
        self._estimator = estimator or FieldEstimator(config, self._kernels)

    ######################################################################
    # -- Individual Forces -- #
    ######################################################################

    def pressureForce(
        self, masses: np.ndarray, fields: SphFields, pairs: NeighborPairs,
    ) -> np.ndarray:
        '''
        Symmetrized pressure force using the spiky kernel gradient.

        The spiky derivative is negative, so positive pressure pushes
        particles apart along n(x_p - x_i). The self pair has a zero
        direction and contributes nothing.

        Parameters:
        -----------
        masses : np.ndarray
            Particle masses, shape (N,)
        fields : SphFields
            Field estimates of this tick
        pairs : NeighborPairs
            Neighbor pairs of this tick

        Returns:
        --------
        np.ndarray : Pressure forces, shape (N, 3)
        '''
        h = self._config.supportRadius
        i, j = pairs.iIdx, pairs.jIdx
        dw = self._kernels.spiky.gradientBatch(pairs.distances, h)

        pressureSum = fields.pressures[i] + fields.pressures[j]
        coeff = masses[j] * pressureSum / (2.0 * fields.densities[j]) * dw

        return -pairs.sumPerParticle(pairs.directions * coeff[:, np.newaxis])

    def viscosityForce(
        self,
        masses: np.ndarray,
        velocities: np.ndarray,
        fields: SphFields,
        pairs: NeighborPairs,
    ) -> np.ndarray:
        '''
        Viscous diffusion of relative velocity.

        Parameters:
        -----------
        masses : np.ndarray
            Particle masses, shape (N,)
        velocities : np.ndarray
            Velocities from the previous tick, shape (N, 3)
        fields : SphFields
            Field estimates of this tick
        pairs : NeighborPairs
            Neighbor pairs of this tick

        Returns:
        --------
        np.ndarray : Viscosity forces, shape (N, 3)
        '''
        h = self._config.supportRadius
        i, j = pairs.iIdx, pairs.jIdx
        lap = self._kernels.viscosity.laplacianBatch(pairs.distances, h)

        coeff = self._config.viscosity * masses[j] / fields.densities[j] * lap
        relativeVelocity = velocities[j] - velocities[i]

        return pairs.sumPerParticle(relativeVelocity * coeff[:, np.newaxis])

    def surfaceTensionForce(
        self, masses: np.ndarray, fields: SphFields, pairs: NeighborPairs,
    ) -> np.ndarray:
        '''
        Surface tension along the inward interface normal.

        Magnitude sigma * |color divergence|, direction opposite the
        color gradient. Particles with a zero color gradient (no
        interface nearby) feel no surface tension.

        Parameters:
        -----------
        masses : np.ndarray
            Particle masses, shape (N,)
        fields : SphFields
            Field estimates of this tick (color gradients of all
            particles must be complete)
        pairs : NeighborPairs
            Neighbor pairs of this tick

        Returns:
        --------
        np.ndarray : Surface tension forces, shape (N, 3)
        '''
        divergence = self._estimator.computeColorDivergence(
            masses, fields.densities, fields.colorGradients, pairs,
        )
        divergenceMagnitude = np.linalg.norm(divergence, axis=1)

        gradientNorm = np.linalg.norm(fields.colorGradients, axis=1)
        safeNorm = np.where(gradientNorm > 0.0, gradientNorm, 1.0)
        normals = fields.colorGradients / safeNorm[:, np.newaxis]
        normals[gradientNorm == 0.0] = 0.0

        return normals * (-self._config.surfaceTension * divergenceMagnitude)[:, np.newaxis]

    def gravityForce(self, masses: np.ndarray) -> np.ndarray:
        '''
        Constant gravity force (0, -g, 0) * m.

        Parameters:
        -----------
        masses : np.ndarray
            Particle masses, shape (N,)

        Returns:
        --------
        np.ndarray : Gravity forces, shape (N, 3)
        '''
        forces = np.zeros((len(masses), 3))
        forces[:, 1] = -self._config.gravity * masses
        return forces

    ######################################################################
    # -- Net Force and Acceleration -- #
    ######################################################################

    def netForce(
        self,
        masses: np.ndarray,
        velocities: np.ndarray,
        fields: SphFields,
        pairs: NeighborPairs,
    ) -> np.ndarray:
        '''Sum of pressure, gravity, viscosity, and surface tension forces, shape (N, 3).'''
        force = self.pressureForce(masses, fields, pairs) + self.gravityForce(masses)
        force = force + self.viscosityForce(masses, velocities, fields, pairs)
        force = force + self.surfaceTensionForce(masses, fields, pairs)
        return force

    def computeAccelerations(
        self,
        masses: np.ndarray,
        velocities: np.ndarray,
        fields: SphFields,
        pairs: NeighborPairs,
    ) -> np.ndarray:
        '''
        Net acceleration a_p = F_p / rho_p.

        Parameters:
        -----------
        masses : np.ndarray
            Particle masses, shape (N,)
        velocities : np.ndarray
            Velocities from the previous tick, shape (N, 3)
        fields : SphFields
            Field estimates of this tick
        pairs : NeighborPairs
            Neighbor pairs of this tick

        Returns:
        --------
        np.ndarray : Accelerations, shape (N, 3)
        '''
        force = self.netForce(masses, velocities, fields, pairs)
        return force / fields.densities[:, np.newaxis]
