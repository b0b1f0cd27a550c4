"""depviz: resolve and visualize transitive package dependencies."""

__version__ = "0.1.0"
