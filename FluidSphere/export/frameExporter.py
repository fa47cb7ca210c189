# -- Simulation Frame Exporter -- #

'''
Exports SPH simulation frames as JSON for visualization.

Collects particle state snapshots during simulation and writes them
to a JSON file that an external viewer can replay.

The output format stores particle positions, speeds, and densities
for each frame, along with an energy history and the run
configuration.

Sean Bowman [10/17/2026]
'''

from __future__ import annotations

import json
import os
from datetime import datetime

import numpy as np

from FluidSphere.sph.protocols import SimulationConfig, SimulationState
from FluidSphere.sph.particles import ParticleSystem


class FrameExporter:
    '''
    Collects and exports simulation frame data as JSON.

    Frames copy the particle arrays when recorded, so the exporter can
    be fed between ticks without holding references into the live
    particle set.

    Usage:
        exporter = FrameExporter()
        # During simulation loop:
        exporter.addFrame(state, particles)
        # After simulation:
        exporter.export(config, outputDir='output')

    Output JSON format:
    {
        "meta": { "type": "fluidSphere", "nFrames": 301, "created": "...", ... },
        "config": { "nParticles": 1000, "supportRadius": 12.0, ... },
        "frames": [
            {
                "time": 0.0,
                "step": 0,
                "positions": [[x0, y0, z0], ...],
                "speeds": [v0, v1, ...],
                "densities": [rho0, rho1, ...]
            },
            ...
        ],
        "energy": {
            "times": [...],
            "kinetic": [...],
            "potential": [...],
            "total": [...]
        },
        "density": { "min": [...], "max": [...] }
    }
    '''

    def __init__(self) -> None:
        self._frames: list[dict] = []
        self._energyHistory: dict[str, list[float]] = {
            'times': [],
            'kinetic': [],
            'potential': [],
            'total': [],
        }
        self._densityHistory: dict[str, list[float]] = {
            'min': [],
            'max': [],
        }

    @property
    def nFrames(self) -> int:
        '''Number of collected frames.'''
        return len(self._frames)

    @property
    def frames(self) -> list[dict]:
        '''Collected frames, oldest first.'''
        return self._frames

    @property
    def energyHistory(self) -> dict[str, list[float]]:
        '''Energy time series of the collected frames.'''
        return self._energyHistory

    @property
    def densityHistory(self) -> dict[str, list[float]]:
        '''Density extremes of the collected frames.'''
        return self._densityHistory

    def addFrame(self, state: SimulationState, particles: ParticleSystem) -> None:
        '''
        Record a simulation frame.

        Parameters:
        -----------
        state : SimulationState
            Current simulation diagnostics
        particles : ParticleSystem
            Current particle system (read only)
        '''
        speeds = np.linalg.norm(particles.velocities, axis=1)

        frame = {
            'time': round(state.time, 6),
            'step': state.step,
            'positions': np.round(particles.positions, 5).tolist(),
            'speeds': np.round(speeds, 6).tolist(),
            'densities': np.round(particles.densities, 8).tolist(),
        }
        self._frames.append(frame)

        # Track energy history
        self._energyHistory['times'].append(round(state.time, 6))
        self._energyHistory['kinetic'].append(round(state.kineticEnergy, 6))
        self._energyHistory['potential'].append(round(state.potentialEnergy, 6))
        self._energyHistory['total'].append(round(state.totalEnergy, 6))

        self._densityHistory['min'].append(state.minDensity)
        self._densityHistory['max'].append(state.maxDensity)

    def export(
        self,
        config: SimulationConfig,
        outputDir: str = 'FluidSphere/output',
        scenarioName: str = 'gaussianCloud',
    ) -> str:
        '''
        Write all collected frames to a JSON file.

        Parameters:
        -----------
        config : SimulationConfig
            Simulation configuration for metadata
        outputDir : str
            Output directory path
        scenarioName : str
            Scenario name for the filename

        Returns:
        --------
        str : Path to the exported JSON file
        '''
        os.makedirs(outputDir, exist_ok=True)

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        filename = f'fluidSphere_{scenarioName}_{timestamp}.json'
        filepath = os.path.join(outputDir, filename)

        output = {
            'meta': {
                'type': 'fluidSphere',
                'dimensions': 3,
                'nFrames': len(self._frames),
                'nParticles': len(self._frames[0]['positions']) if self._frames else 0,
                'containerRadius': config.containerRadius,
                'created': datetime.now().isoformat(),
            },
            'config': config.toDict(),
            'frames': self._frames,
            'energy': self._energyHistory,
            'density': self._densityHistory,
        }

        with open(filepath, 'w') as f:
            json.dump(output, f, indent=None, separators=(',', ':'))

        return filepath
