# -- SPH Field Estimator -- #

'''
Per-particle field estimates: density, pressure, and the color field.

Each estimate is an SPH sum over the neighbor pairs of the tick,
evaluated for every particle in one vectorized pass. The passes must
run in dependency order:

    density (all) -> pressure (all) -> color gradient (all)
        -> color divergence (per particle, inside the force phase)

Each pass returns a fresh array and never modifies the particle set,
so a pass only ever sees values frozen by the previous one.

Formulas (x_p target, i neighbor, self pair included):

    rho_p   = sum_i m_i * W_poly6(x_p - x_i)
    P_p     = k * (rho_p - rho_0)
    c_p     = sum_i n(x_i - x_p) * m_i / rho_i * dW_poly6(x_i - x_p)
    div_p   = sum_i c_i * m_i / rho_i * lapW_poly6(x_p - x_i)

where n() is the unit vector (zero for the zero vector).

References:
-----------
Muller, Charypar & Gross (2003) -- Particle-Based Fluid Simulation
    for Interactive Applications

Sean Bowman [10/17/2026]
'''

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from FluidSphere.sph.protocols import SimulationConfig, SimulationConsistencyError
from FluidSphere.sph.kernels import KernelSet
from FluidSphere.sph.neighborSearch import NeighborPairs


@dataclass(frozen=True)
class SphFields:
    '''
    Field estimates of one tick, in evaluation order.

    Parameters:
    -----------
    densities : np.ndarray
        Particle densities, shape (N,)
    pressures : np.ndarray
        Particle pressures, shape (N,)
    colorGradients : np.ndarray
        Color-field gradients, shape (N, 3)
    '''

    densities: np.ndarray
    pressures: np.ndarray
    colorGradients: np.ndarray


class FieldEstimator:
    '''
    Computes density, pressure, and color-field quantities.

    Parameters:
    -----------
    config : SimulationConfig
        Simulation configuration (h, rho_0, k)
    kernels : KernelSet | None
        Kernels to use (defaults to the standard set)
    '''

    def __init__(self, config: SimulationConfig, kernels: KernelSet | None = None) -> None:
        self._config = config
        self._kernels = kernels or KernelSet()

    ######################################################################
    # -- Density and Pressure -- #
    ######################################################################

    def computeDensity(self, masses: np.ndarray, pairs: NeighborPairs) -> np.ndarray:
        '''
        SPH density summation (self contribution included).

        Parameters:
        -----------
        masses : np.ndarray
            Particle masses, shape (N,)
        pairs : NeighborPairs
            Neighbor pairs of this tick

        Returns:
        --------
        np.ndarray : Densities, shape (N,)
        '''
        w = self._kernels.poly6.evaluateBatch(pairs.distances, self._config.supportRadius)
        return pairs.sumPerParticle(masses[pairs.jIdx] * w)

    def computePressure(self, densities: np.ndarray) -> np.ndarray:
        '''
        Linear equation of state p = k * (rho - rho_0).

        Negative pressures (density below rest) are kept; they act as
        a cohesive tension.

        Parameters:
        -----------
        densities : np.ndarray
            Densities of this tick, shape (N,)

        Returns:
        --------
        np.ndarray : Pressures, shape (N,)
        '''
        return self._config.gasConstant * (densities - self._config.restDensity)

    @staticmethod
    def checkDensities(densities: np.ndarray) -> None:
        '''
        Verify every density is finite and strictly positive.

        The self contribution m_p * W_poly6(0, h) keeps densities
        positive for any positive mass and support radius, so a failure
        means the run is mis-parameterized.

        Raises:
        -------
        SimulationConsistencyError : On a non-positive or non-finite density
        '''
        bad = ~(np.isfinite(densities) & (densities > 0.0))
        if np.any(bad):
            first = int(np.argmax(bad))
            raise SimulationConsistencyError(
                f'{int(np.sum(bad))} particle(s) with invalid density '
                f'(particle {first}: {densities[first]!r}); check supportRadius and masses'
            )

    ######################################################################
    # -- Color Field -- #
    ######################################################################

    def computeColorField(
        self, masses: np.ndarray, densities: np.ndarray, pairs: NeighborPairs,
    ) -> np.ndarray:
        '''
        Scalar color field c_p = sum_i m_i / rho_i * W_poly6(x_p - x_i).

        Close to 1 inside the fluid and falling off toward the free
        surface. Not used by the force model; exposed for diagnostics.

        Parameters:
        -----------
        masses : np.ndarray
            Particle masses, shape (N,)
        densities : np.ndarray
            Densities of this tick, shape (N,)
        pairs : NeighborPairs
            Neighbor pairs of this tick

        Returns:
        --------
        np.ndarray : Color field values, shape (N,)
        '''
        h = self._config.supportRadius
        j = pairs.jIdx
        w = self._kernels.poly6.evaluateBatch(pairs.distances, h)
        return pairs.sumPerParticle(masses[j] / densities[j] * w)

    def computeColorGradient(
        self, masses: np.ndarray, densities: np.ndarray, pairs: NeighborPairs,
    ) -> np.ndarray:
        '''
        Color-field gradient, used as an interface-normal proxy.

        The direction of each term is the unit vector from the target
        particle toward its neighbor, i.e. -pairs.directions. The self
        pair has a zero direction and a zero kernel derivative.

        Parameters:
        -----------
        masses : np.ndarray
            Particle masses, shape (N,)
        densities : np.ndarray
            Densities of this tick (all particles), shape (N,)
        pairs : NeighborPairs
            Neighbor pairs of this tick

        Returns:
        --------
        np.ndarray : Color gradients, shape (N, 3)
        '''
        h = self._config.supportRadius
        j = pairs.jIdx
        dw = self._kernels.poly6.gradientBatch(pairs.distances, h)
        weight = masses[j] / densities[j] * dw
        return pairs.sumPerParticle(-pairs.directions * weight[:, np.newaxis])

    def computeColorDivergence(
        self,
        masses: np.ndarray,
        densities: np.ndarray,
        colorGradients: np.ndarray,
        pairs: NeighborPairs,
    ) -> np.ndarray:
        '''
        Color-field divergence (curvature proxy) for every particle.

        Requires the color gradients of *all* particles from this tick.
        Returns a vector per particle; the surface tension force only
        uses its magnitude.

        Parameters:
        -----------
        masses : np.ndarray
            Particle masses, shape (N,)
        densities : np.ndarray
            Densities of this tick, shape (N,)
        colorGradients : np.ndarray
            Color gradients of this tick, shape (N, 3)
        pairs : NeighborPairs
            Neighbor pairs of this tick

        Returns:
        --------
        np.ndarray : Color divergence vectors, shape (N, 3)
        '''
        h = self._config.supportRadius
        j = pairs.jIdx
        lap = self._kernels.poly6.laplacianBatch(pairs.distances, h)
        weight = masses[j] / densities[j] * lap
        return pairs.sumPerParticle(colorGradients[j] * weight[:, np.newaxis])

    ######################################################################
    # -- Full Field Pass -- #
    ######################################################################

    def estimate(self, masses: np.ndarray, pairs: NeighborPairs) -> SphFields:
        '''
        Run the density, pressure, and color-gradient passes in order.

        Parameters:
        -----------
        masses : np.ndarray
            Particle masses, shape (N,)
        pairs : NeighborPairs
            Neighbor pairs of this tick

        Returns:
        --------
        SphFields : Fresh field estimates

        Raises:
        -------
        SimulationConsistencyError : If any density is invalid
        '''
        densities = self.computeDensity(masses, pairs)
        self.checkDensities(densities)

        pressures = self.computePressure(densities)
        colorGradients = self.computeColorGradient(masses, densities, pairs)

        return SphFields(
            densities=densities,
            pressures=pressures,
            colorGradients=colorGradients,
        )
