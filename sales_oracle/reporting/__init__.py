"""
sales_oracle.reporting — terminal rendering of computed results.

Nothing here computes new figures; every value shown comes from an
``OracleResult``, ``ComparisonResult`` or ``HistoryTrendReport``.

Modules:
  formatters — ASCII blocks for the period summary, comparison, history
               report and saved-history listing, used by the Typer CLI.
"""
