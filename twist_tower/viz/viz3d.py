# twist_tower/viz/viz3d.py
"""
3D VISUALIZATION: Interactive Tower Viewer
==========================================

PURPOSE:
--------
Preview generated buffers with Plotly:
- triangle buffers (tower slabs, facade rails) as vertex-coloured Mesh3d
- line buffers (tween rails, floor loops) as Scatter3d polylines
- pinch/spread attractors as markers with their radius in the hover text

The engine is Y-up; Plotly scenes are Z-up, so every point (x, y, z) is
drawn at (x, z, y).
"""

import os
from typing import Optional

import numpy as np
import plotly.graph_objects as go

from ..geometry.buffer import GeometryBuffer
from ..pipeline import TowerGeometry


def _to_rgb(colors: np.ndarray):
    return [f'rgb({int(r * 255)}, {int(g * 255)}, {int(b * 255)})' for r, g, b in colors]


def mesh_trace(buffer: GeometryBuffer, name: str, opacity: float = 1.0) -> go.Mesh3d:
    """Mesh3d trace for a non-indexed triangle buffer."""
    if buffer.kind != 'triangles':
        raise ValueError(f"mesh_trace needs a triangle buffer, got '{buffer.kind}'")
    p = buffer.positions
    n = buffer.primitive_count
    i = np.arange(n) * 3
    trace = go.Mesh3d(
        x=p[:, 0], y=p[:, 2], z=p[:, 1],
        i=i, j=i + 1, k=i + 2,
        name=name,
        opacity=opacity,
        flatshading=True,
        showlegend=True,
        hoverinfo='skip',
    )
    if buffer.has_colors:
        trace.vertexcolor = _to_rgb(buffer.colors)
    else:
        trace.color = 'lightgray'
    return trace


def line_trace(buffer: GeometryBuffer, name: str, color: str = 'steelblue', width: int = 2) -> go.Scatter3d:
    """Scatter3d trace for a line-segment buffer (pairs broken by None)."""
    if buffer.kind != 'lines':
        raise ValueError(f"line_trace needs a line buffer, got '{buffer.kind}'")
    pairs = buffer.positions[:buffer.primitive_count * 2].reshape(-1, 2, 3)
    xs, ys, zs = [], [], []
    for a, b in pairs:
        # Add None to break line segments
        xs.extend([a[0], b[0], None])
        ys.extend([a[2], b[2], None])
        zs.extend([a[1], b[1], None])
    return go.Scatter3d(
        x=xs, y=ys, z=zs,
        mode='lines',
        line=dict(color=color, width=width),
        name=name,
        hoverinfo='skip',
    )


def create_tower_figure(
    geometry: TowerGeometry,
    title: str = "Parametric Tower",
    show_tower: bool = True,
    show_facade: bool = True,
    show_attractors: bool = True,
    tower_opacity: float = 1.0,
) -> go.Figure:
    """
    Create a Plotly figure for a generated tower.

    Parameters:
    -----------
    geometry : TowerGeometry
        Result of generate_tower()
    title : str
        Plot title
    show_tower : bool
        Draw the floor slabs
    show_facade : bool
        Draw rails, tween rails and floor loops
    show_attractors : bool
        Mark pinch/spread attractors when the field is enabled
    tower_opacity : float
        Slab opacity, lower it to see the facade through the floors

    Returns:
    --------
    go.Figure
    """
    fig = go.Figure()

    if show_tower and geometry.tower is not None:
        fig.add_trace(mesh_trace(geometry.tower, 'Floors', opacity=tower_opacity))

    if show_facade:
        if geometry.rails is not None:
            fig.add_trace(mesh_trace(geometry.rails, 'Rails'))
        if geometry.tweens is not None:
            fig.add_trace(line_trace(geometry.tweens, 'Tween rails', color='steelblue'))
        if geometry.floor_loops is not None:
            fig.add_trace(line_trace(geometry.floor_loops, 'Floor loops', color='darkorange'))

    pinch = geometry.params.facade.pinch
    if show_attractors and pinch.enabled and pinch.attractors:
        a = np.array(pinch.attractors)
        fig.add_trace(go.Scatter3d(
            x=a[:, 0], y=a[:, 2], z=a[:, 1],
            mode='markers',
            marker=dict(size=6, color='red', line=dict(width=1, color='black')),
            name='Attractors',
            text=[f"Attractor {i}: r={pinch.radius:.2f}, s={pinch.strength:+.2f}" for i in range(len(a))],
            hoverinfo='text',
        ))

    fig.update_layout(
        title=dict(text=title, font=dict(size=16)),
        scene=dict(
            xaxis=dict(title='X'),
            yaxis=dict(title='Z'),
            zaxis=dict(title='Y (up)'),
            aspectmode='data',
            camera=dict(eye=dict(x=1.6, y=1.6, z=0.6)),
        ),
        showlegend=True,
        legend=dict(x=0.02, y=0.98),
        margin=dict(l=0, r=0, t=40, b=0),
    )
    return fig


def plot_tower_3d(
    geometry: TowerGeometry,
    title: str = "Parametric Tower",
    outpath: Optional[str] = None,
    show: bool = True,
    **kwargs
) -> go.Figure:
    """
    Create and optionally display/save a tower visualization.

    Example:
    --------
    >>> fig = plot_tower_3d(generate_tower(TowerParams()), outpath="artifacts/tower.html", show=False)
    """
    fig = create_tower_figure(geometry, title=title, **kwargs)

    if outpath:
        os.makedirs(os.path.dirname(outpath) if os.path.dirname(outpath) else '.', exist_ok=True)
        fig.write_html(outpath)
        print(f"3D visualization saved to: {outpath}")

    if show:
        fig.show()

    return fig
