# -- Default Constants for the Spherical SPH Fluid -- #

'''
Physical and numerical defaults for the spherical-container SPH fluid.

Values are in simulation units (length ~ container radius of 40,
unit particle mass). The rest density is tiny, so the
linear equation of state produces a net outward pressure that spreads
the initial particle cloud until it fills the container.

References:
-----------
Muller, Charypar & Gross (2003) -- Particle-Based Fluid Simulation
    for Interactive Applications

Sean Bowman [10/17/2026]
'''

#--------------------------------------------------------------------#
# -- Fluid Properties -- #
#--------------------------------------------------------------------#

# Rest density rho_0 used by the equation of state
restDensity: float = 0.0001

# Gas (stiffness) constant k in p = k * (rho - rho_0)
gasConstant: float = 100.0

# Dynamic viscosity mu
viscosity: float = 0.01

# Surface tension coefficient sigma
surfaceTension: float = 50.0

# Gravity magnitude, acting along -y
gravity: float = 0.1

# Mass of every particle at creation
particleMass: float = 1.0

#--------------------------------------------------------------------#
# -- SPH Numerical Parameters -- #
#--------------------------------------------------------------------#

# Kernel support radius h (all kernels vanish beyond this distance)
supportRadius: float = 12.0

# Fixed time step per tick
timeStep: float = 0.04

# Number of fluid particles
nParticles: int = 1000

# Standard deviation of the per-axis Gaussian used to seed positions
initialSpread: float = 5.0

#--------------------------------------------------------------------#
# -- Container -- #
#--------------------------------------------------------------------#

# Radius R of the spherical container
containerRadius: float = 40.0

# Width of the band inside the wall where collisions are resolved
# (collision when |x| >= R - boundaryMargin)
boundaryMargin: float = 1.0

# Fraction of the outward speed kept after a wall bounce
restitution: float = 0.8

#--------------------------------------------------------------------#
# -- Run Control -- #
#--------------------------------------------------------------------#

# Default number of ticks for a CLI run
nSteps: int = 300

# Record a frame every N ticks
outputInterval: int = 1

# Neighbor search used when none is requested
defaultNeighborSearch: str = 'bruteForce'
