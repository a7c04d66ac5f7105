"""
hppsim: 2D HPP Lattice-Gas Simulator

Particles of unit mass sit on a square lattice, at most one per direction
per cell, and move by alternating streaming and collision steps. Averaged
over blocks of cells, the particle counts behave like a compressible fluid.

Layers:
- core: cells, grid, sources, the update engine, the double-buffered run
- analysis: block aggregation and colouring (density / velocity)
- viz: PNG frame output and matplotlib plots
- runner: frame-writing driver loop
"""

__version__ = "0.1.0"
