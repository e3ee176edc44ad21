# twist_tower/viz - Visualization Tools
"""
VIZ: Plotly preview of generated tower geometry.
"""

from .viz3d import create_tower_figure, plot_tower_3d, mesh_trace, line_trace

__all__ = ['create_tower_figure', 'plot_tower_3d', 'mesh_trace', 'line_trace']
