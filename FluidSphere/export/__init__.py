# -- Export Package -- #

'''
Data export utilities for SPH simulation results.

Exports frame data as JSON for external viewers.

Sean Bowman [10/17/2026]
'''

from FluidSphere.export.frameExporter import FrameExporter
