# -- FluidSphere Test Suite -- #
