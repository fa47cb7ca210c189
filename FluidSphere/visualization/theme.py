# -- Visualization Theme -- #

'''
Centralized dark-mode theme for all FluidSphere Plotly visualizations.

Change colors or template here to restyle every plot at once.

Sean Bowman [10/17/2026]
'''

# Plotly template
TEMPLATE = 'plotly_dark'

# Primary color palette (Material Design, visible on dark backgrounds)
BLUE = '#42A5F5'
RED = '#EF5350'
GREEN = '#66BB6A'
ORANGE = '#FFA726'
CYAN = '#26C6DA'

# Neutrals
WHITE = '#E0E0E0'
REFERENCE_LINE = '#888888'

# Particle coloring by speed
SPEED_COLORSCALE = 'Blues'
