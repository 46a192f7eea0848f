"""
Period processing: one period's raw numbers → annotated OracleResult.

Modules
-------
labels       : generate_period_label() — pt-BR labels with ISO-8601 weeks.
processor    : process_period() + the step helpers (derive_store(),
               derive_seller(), build_distribution(), build_projection() ...).
intelligence : classify_run_trend() + seller/store intelligence, radar and
               concentration reading over a short window of prior periods.
"""
