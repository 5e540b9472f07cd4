"""
Mise kitchen operations package.

The package tracks inventory, recipes, meal logs and daily prep sheets in memory and
reconciles completed prep work back into stock levels.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
