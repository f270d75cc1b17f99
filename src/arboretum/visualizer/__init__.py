"""Arboretum Web Visualizer.

This package provides a web front-end for parsing sentences and viewing
their syntax trees.

To run the visualizer server:
    uvicorn arboretum.visualizer.server:app --reload
"""

__all__: list[str] = []
