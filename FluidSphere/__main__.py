# -- FluidSphere Module Entry Point -- #

'''
Allows running the simulation with `python -m FluidSphere`.

Sean Bowman [10/17/2026]
'''

from FluidSphere.runner import main

main()
