"""
Scoring engine: fuses technical and sentiment ratings into an actionable
signal with confidence and ordered explanations.

Modules
-------
hybrid         : calculate_hybrid_score() + classify_action() — the shared
                 threshold lookup used by every bucketing caller.
rules          : ConfidenceRule pipeline (alignment, RSI extremes, mention
                 velocity, divergence) — each rule independently testable.
recommendation : generate_recommendation() — runs the rule pipeline and
                 buckets the hybrid score into an action.
freshness      : get_signal_freshness() + format_time_ago().

All functions are pure: no I/O, no shared mutable state.
"""
