"""
Shared Utilities

Numeric coercion, time-on-ice parsing, rate helpers and rink geometry used
by the models, calculators and processors.
"""
