"""
Sales Oracle — retail sales-performance scoring, comparison and history engine.

Packages:
  scoring    — formula primitives and the penalised score engine.
  processing — period label, per-period derivations and intelligence block.
  evolution  — base-vs-current comparison and long-horizon history trends.
  feedback   — deterministic seller feedback templates.
  narrative  — prompt builders and the hosted text-generation client.
  db         — SQLite snapshot store for saved periods.
  reporting  — ASCII/pt-BR formatters for CLI output.
"""
