# -- FluidSphere Simulation Runner -- #

'''
Command-line entry point for running the spherical SPH fluid.

Builds the configuration, seeds the initial particle cloud, runs the
fixed-step solver with progress reporting, and optionally exports
frame data and Plotly diagnostics.

Usage:
    python -m FluidSphere                                  # Small preset
    python -m FluidSphere --preset reference               # 1000 particles
    python -m FluidSphere --config configs/sphere.json
    python -m FluidSphere --steps 500 --seed 7 --neighbor-search hashGrid
    python -m FluidSphere --no-export --plot

Sean Bowman [10/17/2026]
'''

from __future__ import annotations

import argparse
import dataclasses
import time as timeModule

from FluidSphere.sph.protocols import NEIGHBOR_SEARCH_TYPES, SimulationConfig, SphSolverProtocol
from FluidSphere.sph.sphSolver import SphSolver
from FluidSphere.scenarios.gaussianCloud import createGaussianCloud
from FluidSphere.export.frameExporter import FrameExporter


DEFAULT_OUTPUT_DIR = 'FluidSphere/output'


#--------------------------------------------------------------------#
# -- CLI Argument Parser -- #
#--------------------------------------------------------------------#

def buildParser() -> argparse.ArgumentParser:
    '''Build the CLI argument parser.'''
    parser = argparse.ArgumentParser(
        description='FluidSphere -- SPH fluid in a spherical container',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        '--config', type=str, default=None,
        help='Path to JSON configuration file (overrides --preset)',
    )
    parser.add_argument(
        '--preset', type=str, default='small',
        choices=['small', 'reference'],
        help='Configuration preset (default: small)',
    )
    parser.add_argument(
        '--steps', type=int, default=None,
        help='Number of ticks to run (default: from config)',
    )
    parser.add_argument(
        '--seed', type=int, default=None,
        help='Seed for the initial particle cloud',
    )
    parser.add_argument(
        '--neighbor-search', type=str, default=None,
        choices=list(NEIGHBOR_SEARCH_TYPES),
        help='Neighbor search algorithm (default: from config)',
    )
    parser.add_argument(
        '--strict-containment', action='store_true',
        help='Project particles that leave the sphere back inside',
    )
    parser.add_argument(
        '--no-export', action='store_true',
        help='Skip frame data export',
    )
    parser.add_argument(
        '--plot', action='store_true',
        help='Write Plotly diagnostic figures as HTML',
    )
    parser.add_argument(
        '--output-dir', type=str, default=DEFAULT_OUTPUT_DIR,
        help=f'Output directory for exported data (default: {DEFAULT_OUTPUT_DIR})',
    )

    return parser


def configFromArgs(args: argparse.Namespace) -> SimulationConfig:
    '''
    Resolve the run configuration from parsed CLI arguments.

    Parameters:
    -----------
    args : argparse.Namespace
        Parsed arguments from buildParser()

    Returns:
    --------
    SimulationConfig : Validated configuration
    '''
    if args.config:
        config = SimulationConfig.fromJson(args.config)
    else:
        presets = {
            'small': SimulationConfig.small,
            'reference': SimulationConfig.reference,
        }
        config = presets[args.preset]()

    overrides = {}
    if args.steps is not None:
        overrides['nSteps'] = args.steps
    if args.seed is not None:
        overrides['seed'] = args.seed
    if args.neighbor_search is not None:
        overrides['neighborSearch'] = args.neighbor_search
    if args.strict_containment:
        overrides['strictContainment'] = True

    return dataclasses.replace(config, **overrides).validate()


#--------------------------------------------------------------------#
# -- Runner Class -- #
#--------------------------------------------------------------------#

class FluidSphereRunner:
    '''
    Runs a spherical-container SPH simulation and stores results.

    Handles the full pipeline: particle setup, simulation loop with
    progress reporting, and optional frame export and plots.
    '''

    def __init__(self) -> None:
        self._exporter: FrameExporter = FrameExporter()

    @property
    def exporter(self) -> FrameExporter:
        '''Frame exporter holding the recorded frames.'''
        return self._exporter

    def run(
        self,
        config: SimulationConfig,
        doExport: bool = True,
        doPlot: bool = False,
        exportDir: str = DEFAULT_OUTPUT_DIR,
        solver: SphSolverProtocol | None = None,
    ) -> dict:
        '''
        Run a simulation from a configuration.

        Parameters:
        -----------
        config : SimulationConfig
            Simulation configuration
        doExport : bool
            Whether to export frame data
        doPlot : bool
            Whether to write Plotly diagnostics
        exportDir : str
            Output directory for exported data
        solver : SphSolverProtocol | None
            Step driver to use (defaults to SphSolver(config))

        Returns:
        --------
        dict : Simulation results summary
        '''
        print()
        print('=' * 62)
        print('  FLUIDSPHERE -- SPH FLUID IN A SPHERICAL CONTAINER')
        print('=' * 62)
        print()

        #--------------------------------------------------------------------#
        # Scenario Setup
        #--------------------------------------------------------------------#
        print('-' * 62)
        print('  SCENARIO SETUP')
        print('-' * 62)

        particles = createGaussianCloud(config)

        print(f'  Particles:         {particles.nParticles:8d}')
        print(f'  Initial Spread:    {config.initialSpread:8.2f}')
        print(f'  Seed:              {str(config.seed):>8}')
        print(f'  Container Radius:  {config.containerRadius:8.2f}')
        print(f'  Support Radius:    {config.supportRadius:8.2f}')
        print(f'  Rest Density:      {config.restDensity:8.2e}')
        print(f'  Gas Constant:      {config.gasConstant:8.2f}')
        print(f'  Viscosity:         {config.viscosity:8.4f}')
        print(f'  Surface Tension:   {config.surfaceTension:8.2f}')
        print(f'  Gravity:           {config.gravity:8.3f}')
        print(f'  Time Step:         {config.timeStep:8.4f}')
        print(f'  Ticks:             {config.nSteps:8d}')
        print()

        #--------------------------------------------------------------------#
        # Initialize Solver
        #--------------------------------------------------------------------#
        print('-' * 62)
        print('  INITIALIZING SOLVER')
        print('-' * 62)

        if solver is None:
            solver = SphSolver(config)
        solver.initialize(particles)
        initialPairs = solver.findNeighbors(particles)

        print(f'  Neighbor Search:   {config.neighborSearch:>12}')
        print(f'  Initial Pairs:     {initialPairs.nPairs:12d}')
        print(f'  Containment:       {"strict" if config.strictContainment else "reflect":>12}')
        print()

        # Record initial frame (densities from initialize)
        self._exporter.addFrame(solver.diagnostics(particles), particles)

        #--------------------------------------------------------------------#
        # Simulation Loop
        #--------------------------------------------------------------------#
        print('-' * 62)
        print('  RUNNING SIMULATION')
        print('-' * 62)
        print()
        print(f'  {"Time":>8}  {"Step":>6}  {"MaxVel":>8}  {"MinRho":>9}  {"MaxRho":>9}  {"Hit":>4}  {"Out":>4}  {"Energy":>10}')
        print('  ' + '-' * 70)

        wallClockStart = timeModule.time()
        printInterval = max(1, config.nSteps // 20)

        for _ in range(config.nSteps):
            solver.step(particles)
            state = solver.diagnostics(particles)

            if state.step % config.outputInterval == 0:
                self._exporter.addFrame(state, particles)

            if state.step % printInterval == 0 or state.step == config.nSteps:
                print(
                    f'  {state.time:8.3f}  {state.step:6d}  {state.maxVelocity:8.4f}  '
                    f'{state.minDensity:9.2e}  {state.maxDensity:9.2e}  '
                    f'{state.nColliding:4d}  {state.nOutside:4d}  {state.totalEnergy:10.4f}'
                )

        wallClockEnd = timeModule.time()
        wallClockSeconds = wallClockEnd - wallClockStart

        finalState = solver.diagnostics(particles)

        print()
        print(f'  Simulation complete.')
        print(f'  Total steps:       {finalState.step:8d}')
        print(f'  Wall-clock time:   {wallClockSeconds:8.1f} s')
        print(f'  Frames recorded:   {self._exporter.nFrames:8d}')
        print()

        #--------------------------------------------------------------------#
        # Export
        #--------------------------------------------------------------------#
        exportPath = None
        if doExport:
            print('-' * 62)
            print('  EXPORTING FRAME DATA')
            print('-' * 62)

            exportPath = self._exporter.export(
                config=config,
                outputDir=exportDir,
                scenarioName='gaussianCloud',
            )
            print(f'  Exported to: {exportPath}')
            print()

        plotPaths: list[str] = []
        if doPlot:
            from FluidSphere.visualization.diagnosticPlots import writeDiagnostics

            print('-' * 62)
            print('  WRITING DIAGNOSTIC PLOTS')
            print('-' * 62)

            plotPaths = writeDiagnostics(
                self._exporter,
                outputDir=exportDir,
                containerRadius=config.containerRadius,
                restDensity=config.restDensity,
            )
            for path in plotPaths:
                print(f'  Wrote: {path}')
            print()

        #--------------------------------------------------------------------#
        # Summary
        #--------------------------------------------------------------------#
        print('=' * 62)
        print('  SIMULATION SUMMARY')
        print('=' * 62)
        print(f'  Final KE:          {finalState.kineticEnergy:10.6f}')
        print(f'  Final PE:          {finalState.potentialEnergy:10.6f}')
        print(f'  Final Total E:     {finalState.totalEnergy:10.6f}')
        print(f'  Density Range:     {finalState.minDensity:.3e} .. {finalState.maxDensity:.3e}')
        print(f'  Max Velocity:      {finalState.maxVelocity:8.4f}')
        print(f'  Outside Container: {finalState.nOutside:8d}')
        print('=' * 62)
        print()

        return {
            'finalState': finalState,
            'particles': particles,
            'wallClockSeconds': wallClockSeconds,
            'nFrames': self._exporter.nFrames,
            'exportPath': exportPath,
            'plotPaths': plotPaths,
        }


#--------------------------------------------------------------------#
# -- CLI Entry Point -- #
#--------------------------------------------------------------------#

def main(argv: list[str] | None = None) -> None:
    '''CLI entry point.'''
    parser = buildParser()
    args = parser.parse_args(argv)

    config = configFromArgs(args)

    runner = FluidSphereRunner()
    runner.run(
        config,
        doExport=not args.no_export,
        doPlot=args.plot,
        exportDir=args.output_dir,
    )


if __name__ == '__main__':
    main()
