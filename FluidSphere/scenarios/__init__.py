# -- Simulation Scenarios Package -- #

'''
Initial conditions for the spherical-container fluid.

Sean Bowman [10/17/2026]
'''

from FluidSphere.scenarios.gaussianCloud import createGaussianCloud
