# -- Runner, Export, and Plot Tests -- #

'''
End-to-end checks of the command-line runner and its outputs.

Sean Bowman [10/17/2026]
'''

import dataclasses
import json
import os

import plotly.graph_objects as go

from FluidSphere.runner import FluidSphereRunner, buildParser, configFromArgs, main
from FluidSphere.sph.protocols import SimulationConfig, SphSolverProtocol
from FluidSphere.sph.sphSolver import SphSolver
from FluidSphere.export.frameExporter import FrameExporter
from FluidSphere.visualization.diagnosticPlots import (
    plotDensityHistory,
    plotEnergyHistory,
    plotParticleSnapshot,
    writeDiagnostics,
)


def _recordedExporter(config, particles, nSteps=3):
    solver = SphSolver(config)
    exporter = FrameExporter()
    for _ in range(nSteps):
        solver.step(particles)
        exporter.addFrame(solver.diagnostics(particles), particles)
    return exporter


def testRunnerWithoutExport(tinyConfig, capsys):
    results = FluidSphereRunner().run(tinyConfig, doExport=False)

    assert results['finalState'].step == tinyConfig.nSteps
    assert results['nFrames'] == tinyConfig.nSteps + 1
    assert results['exportPath'] is None
    assert results['particles'].nParticles == tinyConfig.nParticles
    assert 'SIMULATION SUMMARY' in capsys.readouterr().out


def testRunnerExportAndPlots(tinyConfig, tmp_path):
    results = FluidSphereRunner().run(tinyConfig, doExport=True, doPlot=True, exportDir=str(tmp_path))

    with open(results['exportPath']) as f:
        data = json.load(f)

    assert data['meta']['nFrames'] == tinyConfig.nSteps + 1
    assert data['meta']['nParticles'] == tinyConfig.nParticles
    assert data['config']['seed'] == tinyConfig.seed
    assert len(data['frames'][0]['positions']) == tinyConfig.nParticles
    assert len(data['energy']['total']) == tinyConfig.nSteps + 1

    assert len(results['plotPaths']) == 3
    assert all(os.path.exists(path) for path in results['plotPaths'])


def testOutputIntervalThinsFrames(tinyConfig):
    config = dataclasses.replace(tinyConfig, nSteps=6, outputInterval=3)

    results = FluidSphereRunner().run(config, doExport=False)

    # Initial frame plus steps 3 and 6
    assert results['nFrames'] == 3


def testConfigFromArgs(tmp_path):
    parser = buildParser()

    args = parser.parse_args(['--preset', 'small', '--steps', '7', '--seed', '2',
                              '--neighbor-search', 'hashGrid', '--strict-containment'])
    config = configFromArgs(args)

    assert config.nParticles == SimulationConfig.small().nParticles
    assert config.nSteps == 7
    assert config.seed == 2
    assert config.neighborSearch == 'hashGrid'
    assert config.strictContainment is True

    configPath = tmp_path / 'run.json'
    configPath.write_text(json.dumps({'simulation': {'nParticles': 40, 'nSteps': 2}}))
    fromFile = configFromArgs(parser.parse_args(['--config', str(configPath)]))
    assert fromFile.nParticles == 40
    assert fromFile.nSteps == 2


def testMainRunsFromConfigFile(tmp_path, capsys):
    configPath = tmp_path / 'run.json'
    configPath.write_text(json.dumps({
        'simulation': {'nParticles': 30, 'nSteps': 2, 'seed': 4, 'initialSpread': 3.0},
    }))

    main(['--config', str(configPath), '--no-export'])

    assert 'RUNNING SIMULATION' in capsys.readouterr().out


def testExporterRecordsCopies(tinyConfig, tinyCloud):
    exporter = _recordedExporter(tinyConfig, tinyCloud, nSteps=2)
    firstPosition = list(exporter.frames[0]['positions'][0])

    tinyCloud.positions[0] = [100.0, 100.0, 100.0]

    assert exporter.nFrames == 2
    assert exporter.frames[0]['positions'][0] == firstPosition
    assert exporter.frames[1]['step'] == 2
    assert len(exporter.densityHistory['min']) == 2


def testDiagnosticFigures(tinyConfig, tinyCloud, tmp_path):
    exporter = _recordedExporter(tinyConfig, tinyCloud)

    assert isinstance(plotEnergyHistory(exporter), go.Figure)
    assert len(plotDensityHistory(exporter, restDensity=tinyConfig.restDensity).data) == 2

    snapshot = plotParticleSnapshot(exporter, tinyConfig.containerRadius)
    assert snapshot.data[-1].name == 'Particles'

    paths = writeDiagnostics(exporter, str(tmp_path), tinyConfig.containerRadius)
    assert sorted(os.path.basename(p) for p in paths) == [
        'densityHistory.html', 'energyHistory.html', 'particleSnapshot.html',
    ]


def testInitialFrameHasRealDensities(tinyConfig):
    runner = FluidSphereRunner()
    runner.run(tinyConfig, doExport=False)

    firstFrame = runner.exporter.frames[0]
    assert firstFrame['step'] == 0
    assert min(firstFrame['densities']) > 0.0
    assert runner.exporter.densityHistory['min'][0] > 0.0
    assert runner.exporter.densityHistory['min'][0] <= runner.exporter.densityHistory['max'][0]


def testRunnerUsesSuppliedSolver(tinyConfig):
    config = dataclasses.replace(tinyConfig, neighborSearch='kdTree')
    solver: SphSolverProtocol = SphSolver(config)

    results = FluidSphereRunner().run(config, doExport=False, solver=solver)

    assert solver.diagnostics(results['particles']).step == config.nSteps
    assert results['finalState'].step == config.nSteps
