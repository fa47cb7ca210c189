# -- Visualization Subpackage -- #

'''
Plotly-based diagnostic plots for simulation runs.
'''

from FluidSphere.visualization.diagnosticPlots import plotEnergyHistory, plotDensityHistory, plotParticleSnapshot
