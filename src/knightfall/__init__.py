"""knightfall: chess rules, game session and negamax move search."""

__version__ = "0.1.0"
