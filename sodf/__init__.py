"""Object description toolkit: shape geometry, frame alignment, fluid fill computations, resource URI resolution, an entity-component database and a weighted directed graph."""

__version__ = "0.1.0"