"""
Scoring: pure numeric functions, no I/O.

Modules
-------
formulas : icm() + gap() + composite_index() + classify_health()
           + classify_seller() — the shared 40/30/30 primitives.
engine   : ScoreComponents dataclass + pillar_note() + the spread,
           dependency, zero-output penalties + store_score() / seller_score().
"""
