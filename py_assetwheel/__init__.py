"""
Asset wheel layouts: nested Voronoi partition and circle packing of wallet holdings.
"""

__version__ = "0.1.0"
