"""Company rollup aggregation.

This package contains the engine that folds many audit records into one
row per company: running sums per metric family, weighted ratios with a
zero-denominator policy, and the derived complement columns.
"""
