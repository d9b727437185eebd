"""NextEra simulation core.

Deterministic battle and progression rules for the NextEra turn-based
combat game: seeded random streams, the stat pipeline, ability and
critical-hit resolution, elemental/gem bonuses and reward generation.
"""

__version__ = "0.1.0"
