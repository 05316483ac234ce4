"""
Cup Stack - Lane stacking puzzle engine

A deterministic engine for a four-lane cup stacking puzzle:
- Board state and linked cup chains
- Move and forced-drop resolution with ordered event streams
- Win detection
- Forced-loss lookahead
- Seeded, replayable drop lanes
"""

__version__ = "0.1.0"
