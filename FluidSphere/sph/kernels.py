# -- SPH Smoothing Kernels -- #

'''
Smoothing kernel functions for SPH interpolation in 3D.

Implements the three kernels of Muller et al. (2003), each with
compact support of radius h:

- Poly6: density and color-field interpolation, plus the radial
  derivative and laplacian used for the color-field gradient and
  divergence
- Spiky: steep near-field kernel whose gradient drives the pressure
  force (does not vanish as r -> 0, so particles do not clump)
- Viscosity: laplacian only, non-negative on the whole support

Every kernel evaluates on the closed ball 0 <= r <= h and returns
exactly 0 beyond it. The normalization constants are the published
ones; densities and pressures are consumed in absolute units by the
force model, so they must not be rescaled.

References:
-----------
Muller, Charypar & Gross (2003) -- Particle-Based Fluid Simulation
    for Interactive Applications
Monaghan (1992) -- Smoothed Particle Hydrodynamics

Sean Bowman [10/17/2026]
'''

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Protocol

import numpy as np


######################################################################
# -- Kernel Protocol -- #
######################################################################

class SmoothingKernel(Protocol):
    '''Protocol for radially symmetric SPH kernels.'''

    def evaluate(self, rVec: np.ndarray, h: float) -> float:
        '''
        Evaluate kernel W(r, h) for a relative position vector.

        Parameters:
        -----------
        rVec : np.ndarray
            Relative position x_a - x_b, shape (3,)
        h : float
            Support radius

        Returns:
        --------
        float : Kernel value
        '''
        ...

    def evaluateBatch(self, distances: np.ndarray, h: float) -> np.ndarray:
        '''Evaluate W for an array of distances, shape (M,).'''
        ...


def _inSupport(distances: np.ndarray, h: float) -> np.ndarray:
    '''Mask of distances inside the closed support ball.'''
    return (distances >= 0.0) & (distances <= h)


######################################################################
# -- Poly6 Kernel -- #
######################################################################

class Poly6Kernel:
    '''
    Poly6 smoothing kernel.

    W(r, h) = 315 / (64 * pi * h^9) * (h^2 - r^2)^3     for r <= h

    Smooth (C2) with zero gradient at both the center and the
    support boundary. Used for the density summation and for the
    color field and its derivatives.
    '''

    @staticmethod
    def normalization(h: float) -> float:
        '''Normalization constant 315 / (64 * pi * h^9).'''
        return 315.0 / (64.0 * math.pi * h ** 9)

    def evaluate(self, rVec: np.ndarray, h: float) -> float:
        '''
        Evaluate W_poly6 for a relative position vector.

        Parameters:
        -----------
        rVec : np.ndarray
            Relative position, shape (3,)
        h : float
            Support radius

        Returns:
        --------
        float : Kernel value
        '''
        r = float(np.linalg.norm(rVec))
        if r > h:
            return 0.0
        diff = h * h - r * r
        return self.normalization(h) * diff * diff * diff

    def gradient(self, rVec: np.ndarray, h: float) -> float:
        '''
        Scalar radial derivative of the poly6 kernel.

        dW/dr = 315 / (64 * pi * h^9) * (-2r) * 3 * (h^2 - r^2)^2

        Multiplied by a unit direction by the caller to build the
        color-field gradient. Vanishes at r = 0.

        Parameters:
        -----------
        rVec : np.ndarray
            Relative position, shape (3,)
        h : float
            Support radius

        Returns:
        --------
        float : dW/dr (non-positive)
        '''
        r = float(np.linalg.norm(rVec))
        if r > h:
            return 0.0
        diff = h * h - r * r
        return self.normalization(h) * (-2.0 * r) * 3.0 * diff * diff

    def laplacian(self, rVec: np.ndarray, h: float) -> float:
        '''
        Laplacian-like term used for the color-field divergence.

        315 / (64 * pi * h^9) * 6 * (h^2 - r^2) * (5r^2 - h^2)

        Parameters:
        -----------
        rVec : np.ndarray
            Relative position, shape (3,)
        h : float
            Support radius

        Returns:
        --------
        float : Laplacian value
        '''
        r = float(np.linalg.norm(rVec))
        if r > h:
            return 0.0
        rSq = r * r
        return self.normalization(h) * 6.0 * (h * h - rSq) * (5.0 * rSq - h * h)

    ######################################################################
    # -- Vectorized (Batch) Operations -- #
    ######################################################################

    def evaluateBatch(self, distances: np.ndarray, h: float) -> np.ndarray:
        '''
        Evaluate W_poly6 for an array of distances.

        Parameters:
        -----------
        distances : np.ndarray
            Pair distances, shape (M,)
        h : float
            Support radius

        Returns:
        --------
        np.ndarray : Kernel values, shape (M,)
        '''
        result = np.zeros_like(distances, dtype=float)
        active = _inSupport(distances, h)
        diff = h * h - distances[active] ** 2
        result[active] = self.normalization(h) * diff ** 3
        return result

    def gradientBatch(self, distances: np.ndarray, h: float) -> np.ndarray:
        '''Radial derivative dW/dr for an array of distances, shape (M,).'''
        result = np.zeros_like(distances, dtype=float)
        active = _inSupport(distances, h)
        r = distances[active]
        diff = h * h - r * r
        result[active] = self.normalization(h) * (-2.0 * r) * 3.0 * diff ** 2
        return result

    def laplacianBatch(self, distances: np.ndarray, h: float) -> np.ndarray:
        '''Laplacian term for an array of distances, shape (M,).'''
        result = np.zeros_like(distances, dtype=float)
        active = _inSupport(distances, h)
        rSq = distances[active] ** 2
        result[active] = self.normalization(h) * 6.0 * (h * h - rSq) * (5.0 * rSq - h * h)
        return result


######################################################################
# -- Spiky Kernel -- #
######################################################################

class SpikyKernel:
    '''
    Spiky smoothing kernel.

    W(r, h) = 15 / (pi * h^6) * (h - r)^3     for r <= h

    Its gradient stays finite and non-zero as r -> 0, which gives the
    pressure force the repulsion needed to keep particles from
    clustering at small separations.
    '''

    @staticmethod
    def normalization(h: float) -> float:
        '''Normalization constant 15 / (pi * h^6).'''
        return 15.0 / (math.pi * h ** 6)

    def evaluate(self, rVec: np.ndarray, h: float) -> float:
        '''
        Evaluate W_spiky for a relative position vector.

        Parameters:
        -----------
        rVec : np.ndarray
            Relative position, shape (3,)
        h : float
            Support radius

        Returns:
        --------
        float : Kernel value
        '''
        r = float(np.linalg.norm(rVec))
        if r > h:
            return 0.0
        return self.normalization(h) * (h - r) ** 3

    def gradient(self, rVec: np.ndarray, h: float) -> float:
        '''
        Scalar radial derivative of the spiky kernel.

        dW/dr = 15 / (pi * h^6) * (-3) * (h - r)^2

        Parameters:
        -----------
        rVec : np.ndarray
            Relative position, shape (3,)
        h : float
            Support radius

        Returns:
        --------
        float : dW/dr (non-positive)
        '''
        r = float(np.linalg.norm(rVec))
        if r > h:
            return 0.0
        return self.normalization(h) * -3.0 * (h - r) ** 2

    def evaluateBatch(self, distances: np.ndarray, h: float) -> np.ndarray:
        '''Evaluate W_spiky for an array of distances, shape (M,).'''
        result = np.zeros_like(distances, dtype=float)
        active = _inSupport(distances, h)
        result[active] = self.normalization(h) * (h - distances[active]) ** 3
        return result

    def gradientBatch(self, distances: np.ndarray, h: float) -> np.ndarray:
        '''Radial derivative dW/dr for an array of distances, shape (M,).'''
        result = np.zeros_like(distances, dtype=float)
        active = _inSupport(distances, h)
        result[active] = self.normalization(h) * -3.0 * (h - distances[active]) ** 2
        return result


######################################################################
# -- Viscosity Kernel -- #
######################################################################

class ViscosityKernel:
    '''
    Viscosity kernel (laplacian only).

    lap W(r, h) = 45 / (pi * h^6) * (h - r)     for r <= h

    Positive everywhere inside the support and decreasing linearly to
    zero at r = h, so the viscous term only ever diffuses relative
    velocity and never adds energy.
    '''

    @staticmethod
    def normalization(h: float) -> float:
        '''Normalization constant 45 / (pi * h^6).'''
        return 45.0 / (math.pi * h ** 6)

    def laplacian(self, rVec: np.ndarray, h: float) -> float:
        '''
        Evaluate the viscosity laplacian for a relative position vector.

        Parameters:
        -----------
        rVec : np.ndarray
            Relative position, shape (3,)
        h : float
            Support radius

        Returns:
        --------
        float : Laplacian value (>= 0)
        '''
        r = float(np.linalg.norm(rVec))
        if r > h:
            return 0.0
        return self.normalization(h) * (h - r)

    def laplacianBatch(self, distances: np.ndarray, h: float) -> np.ndarray:
        '''Viscosity laplacian for an array of distances, shape (M,).'''
        result = np.zeros_like(distances, dtype=float)
        active = _inSupport(distances, h)
        result[active] = self.normalization(h) * (h - distances[active])
        return result


######################################################################
# -- Kernel Bundle -- #
######################################################################

@dataclass
class KernelSet:
    '''
    The kernels used by one solver, grouped by role.

    Parameters:
    -----------
    poly6 : Poly6Kernel
        Density and color-field kernel
    spiky : SpikyKernel
        Pressure-force kernel
    viscosity : ViscosityKernel
        Viscous diffusion kernel
    '''

    poly6: Poly6Kernel = field(default_factory=Poly6Kernel)
    spiky: SpikyKernel = field(default_factory=SpikyKernel)
    viscosity: ViscosityKernel = field(default_factory=ViscosityKernel)
