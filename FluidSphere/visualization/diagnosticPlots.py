# -- Simulation Diagnostic Plots -- #

'''
Plotly-based interactive plots for inspecting a finished run.

Works from the data collected by FrameExporter: energy and density
histories, and a 3D scatter of one recorded frame inside the
container wireframe.

Sean Bowman [10/17/2026]
'''

from __future__ import annotations

import os

import numpy as np
import plotly.graph_objects as go

from FluidSphere.export.frameExporter import FrameExporter
from FluidSphere.visualization import theme


def plotEnergyHistory(exporter: FrameExporter) -> go.Figure:
    '''
    Kinetic, potential, and total energy vs simulated time.

    Parameters:
    -----------
    exporter : FrameExporter
        Exporter holding the recorded frames

    Returns:
    --------
    go.Figure : Plotly figure
    '''
    energy = exporter.energyHistory

    fig = go.Figure()

    fig.add_trace(go.Scatter(
        x=energy['times'], y=energy['kinetic'],
        mode='lines', name='Kinetic',
        line=dict(color=theme.RED),
    ))
    fig.add_trace(go.Scatter(
        x=energy['times'], y=energy['potential'],
        mode='lines', name='Potential',
        line=dict(color=theme.BLUE),
    ))
    fig.add_trace(go.Scatter(
        x=energy['times'], y=energy['total'],
        mode='lines', name='Total',
        line=dict(color=theme.WHITE, width=2),
    ))

    fig.update_layout(
        title='Energy History',
        xaxis_title='Time',
        yaxis_title='Energy',
        template=theme.TEMPLATE,
        height=400,
    )

    return fig


def plotDensityHistory(exporter: FrameExporter, restDensity: float | None = None) -> go.Figure:
    '''
    Minimum and maximum particle density vs simulated time.

    Parameters:
    -----------
    exporter : FrameExporter
        Exporter holding the recorded frames
    restDensity : float | None
        Draw a reference line at the rest density when given

    Returns:
    --------
    go.Figure : Plotly figure
    '''
    times = exporter.energyHistory['times']
    density = exporter.densityHistory

    fig = go.Figure()

    fig.add_trace(go.Scatter(
        x=times, y=density['max'],
        mode='lines', name='Max density',
        line=dict(color=theme.ORANGE),
    ))
    fig.add_trace(go.Scatter(
        x=times, y=density['min'],
        mode='lines', name='Min density',
        fill='tonexty', line=dict(color=theme.GREEN),
    ))

    if restDensity is not None:
        fig.add_hline(
            y=restDensity,
            line=dict(color=theme.REFERENCE_LINE, dash='dash', width=1),
            annotation_text=f'Rest density: {restDensity:g}',
        )

    fig.update_layout(
        title='Density Range',
        xaxis_title='Time',
        yaxis_title='Density',
        template=theme.TEMPLATE,
        height=400,
    )

    return fig


def _sphereWireframe(radius: float, nLines: int = 12, nPoints: int = 60) -> list[go.Scatter3d]:
    '''Latitude and longitude circles of a sphere as line traces.'''
    traces = []
    t = np.linspace(0.0, 2.0 * np.pi, nPoints)

    # Latitude circles
    for lat in np.linspace(-np.pi / 2.0, np.pi / 2.0, nLines // 2 + 2)[1:-1]:
        r = radius * np.cos(lat)
        traces.append(go.Scatter3d(
            x=r * np.cos(t), y=np.full_like(t, radius * np.sin(lat)), z=r * np.sin(t),
            mode='lines', line=dict(color=theme.REFERENCE_LINE, width=1),
            showlegend=False, hoverinfo='skip',
        ))

    # Longitude circles
    for lon in np.linspace(0.0, np.pi, nLines // 2, endpoint=False):
        traces.append(go.Scatter3d(
            x=radius * np.cos(t) * np.cos(lon), y=radius * np.sin(t), z=radius * np.cos(t) * np.sin(lon),
            mode='lines', line=dict(color=theme.REFERENCE_LINE, width=1),
            showlegend=False, hoverinfo='skip',
        ))

    return traces


def plotParticleSnapshot(
    exporter: FrameExporter,
    containerRadius: float,
    frameIndex: int = -1,
) -> go.Figure:
    '''
    3D scatter of one recorded frame, colored by particle speed.

    Parameters:
    -----------
    exporter : FrameExporter
        Exporter holding the recorded frames
    containerRadius : float
        Container radius for the wireframe
    frameIndex : int
        Frame to show (default: last)

    Returns:
    --------
    go.Figure : Plotly figure
    '''
    frame = exporter.frames[frameIndex]
    positions = np.asarray(frame['positions'])

    fig = go.Figure(data=_sphereWireframe(containerRadius))

    fig.add_trace(go.Scatter3d(
        x=positions[:, 0], y=positions[:, 1], z=positions[:, 2],
        mode='markers', name='Particles',
        marker=dict(
            size=3,
            color=frame['speeds'],
            colorscale=theme.SPEED_COLORSCALE,
            colorbar=dict(title='Speed'),
        ),
    ))

    fig.update_layout(
        title=f'Particles at t = {frame["time"]:.2f} (step {frame["step"]})',
        template=theme.TEMPLATE,
        scene=dict(aspectmode='data'),
        height=600,
    )

    return fig


def writeDiagnostics(
    exporter: FrameExporter,
    outputDir: str,
    containerRadius: float,
    restDensity: float | None = None,
) -> list[str]:
    '''
    Write the energy, density, and snapshot figures as HTML files.

    Parameters:
    -----------
    exporter : FrameExporter
        Exporter holding the recorded frames
    outputDir : str
        Output directory path
    containerRadius : float
        Container radius for the snapshot wireframe
    restDensity : float | None
        Rest density reference line

    Returns:
    --------
    list[str] : Paths of the written HTML files
    '''
    os.makedirs(outputDir, exist_ok=True)

    figures = {
        'energyHistory': plotEnergyHistory(exporter),
        'densityHistory': plotDensityHistory(exporter, restDensity),
        'particleSnapshot': plotParticleSnapshot(exporter, containerRadius),
    }

    paths = []
    for name, fig in figures.items():
        path = os.path.join(outputDir, f'{name}.html')
        fig.write_html(path)
        paths.append(path)

    return paths
