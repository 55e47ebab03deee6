"""
Portfolio-level aggregation over the visible ticker set.

Modules
-------
distribution : calculate_signal_distribution() — per-action ticker counts.
mood         : calculate_market_mood() + describe_* display helpers.
"""
