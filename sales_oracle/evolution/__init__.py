"""
Evolution: how a store moves across periods.

Modules
-------
comparison : compare_periods() — base (A) vs current (B) pillars, store and
             seller score deltas, mercantil ranks and evolution alerts.
history    : analyze_history() — chronological chart series, three-point
             trends and the consolidated consistency / structural-risk /
             next-cycle indices.
"""
