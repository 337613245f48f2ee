"""
Utility functions module.

Timing helpers shared by the scheduler and the rotator.

Timing Semantics:
- Delays are drawn inclusively from configured [min, max] bounds
- Whole-number bounds draw whole seconds, matching countdown display
- Nonces derive from wall-clock milliseconds and never repeat
"""
