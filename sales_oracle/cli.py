"""
Sales Oracle — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs (period JSON, record ids, options).
  4. Run the engine (process, compare, history) and touch the history store
     only where the command says so.
  5. Report the result to stdout.

Install and run::

    pip install -e .
    sales-oracle --help
    sales-oracle init-db
    sales-oracle validate-config
    sales-oracle process data/input/loja_fev.json --save
    sales-oracle list-history --store "Loja Centro"
    sales-oracle compare --base LOJACENTRO-2025-MONTHLY-01 --current-file data/input/loja_fev.json
    sales-oracle history-trend --store "Loja Centro" --type monthly
    sales-oracle feedback data/input/loja_fev.json --seller "Ana" --type "Ajuste de Rota"
    sales-oracle narrate data/input/loja_fev.json
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="sales-oracle",
    help="Oráculo Comercial — retail sales-performance scoring and comparison CLI.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from sales_oracle.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from sales_oracle.utils.logging import configure_logging
    configure_logging(config.logging)


def _read_period_or_exit(input_file: str):
    """Parse a period JSON file into ``OracleData``, exiting on bad input."""
    from pydantic import ValidationError

    from sales_oracle.models.oracle import OracleData

    path = Path(input_file)
    if not path.exists():
        typer.echo(f"[ERROR] Input file not found: {path}", err=True)
        raise typer.Exit(code=1)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return OracleData.model_validate(raw)
    except json.JSONDecodeError as exc:
        typer.echo(f"[ERROR] {path} is not valid JSON: {exc}", err=True)
        raise typer.Exit(code=1)
    except ValidationError as exc:
        typer.echo(f"[ERROR] {path} does not match the period schema:", err=True)
        for err in exc.errors():
            loc = ".".join(str(part) for part in err["loc"])
            typer.echo(f"  {loc}: {err['msg']}", err=True)
        raise typer.Exit(code=1)


@contextmanager
def _open_db(config, db_path: Optional[str] = None):
    """Open the configured history database with the schema applied."""
    from sales_oracle.db.connection import get_connection
    from sales_oracle.db.schema import apply_schema

    with get_connection(
        db_path or config.database.db_path,
        wal_mode=config.database.wal_mode,
        busy_timeout_ms=config.database.busy_timeout_ms,
    ) as conn:
        apply_schema(conn)
        yield conn


def _process_with_history(config, data):
    """Process ``data`` against the store's saved snapshots of the same granularity."""
    from sales_oracle.db.repositories.history_repo import HistoryRepository
    from sales_oracle.models.history import HISTORY_TYPES
    from sales_oracle.processing.processor import process_period

    period = data.store.period
    prior = []
    if period.type in HISTORY_TYPES:
        with _open_db(config) as conn:
            prior = HistoryRepository(conn).list_for(data.store.name, period.type)
    return process_period(data, prior, window=config.history.intelligence_window)


# ── Setup ─────────────────────────────────────────────────────────────────────

@app.command("init-db")
def init_db(
    db_path: Optional[str] = typer.Option(
        None,
        "--db-path",
        help="Override DB path from config (e.g. data/db/test.db).",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Initialize the SQLite history store.

    Safe to run multiple times — all DDL uses IF NOT EXISTS.
    """
    from sales_oracle.db.schema import ALL_TABLE_NAMES

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    target_path = db_path or config.database.db_path
    typer.echo(f"Initializing database at: {target_path}")
    with _open_db(config, target_path):
        pass

    typer.echo(f"  Tables: {len(ALL_TABLE_NAMES)} created/verified.")
    typer.echo("[OK] Database ready.")


@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)
    narrative = config.narrative
    key_state = "set" if narrative.api_key() else "NOT SET"

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Database path:       {config.database.db_path}")
    typer.echo(f"  Intelligence window: {config.history.intelligence_window}")
    typer.echo(f"  Min trend swing:     {config.history.min_trend_swing}")
    typer.echo(f"  Narrative:           {'enabled' if narrative.enabled else 'disabled'} "
               f"({narrative.model}, {narrative.api_key_env} {key_state})")
    typer.echo(f"  Log level:           {config.logging.level}")
    typer.echo(f"  Debug mode:          {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


# ── Period processing ─────────────────────────────────────────────────────────

@app.command("process")
def process(
    input_file: str = typer.Argument(..., help="Period JSON (store + sellers)."),
    save: bool = typer.Option(
        False,
        "--save",
        help="Save the processed snapshot to history (overwrites the same period).",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the processed result as camelCase JSON to this path.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Score one period and print the store summary.

    Prior snapshots of the same store and granularity feed the trend and
    intelligence blocks. Custom date ranges are processed without history
    and cannot be saved.
    """
    from sales_oracle.db.repositories.history_repo import HistoryRepository
    from sales_oracle.models.history import make_history_record
    from sales_oracle.reporting.formatters import format_period_summary

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    data = _read_period_or_exit(input_file)
    result = _process_with_history(config, data)
    typer.echo(format_period_summary(result))

    if not result.ok:
        raise typer.Exit(code=1)

    if output:
        out_path = Path(output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(
            json.dumps(result.to_json_dict(), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        typer.echo(f"\n  Result written to: {out_path}")

    if save:
        try:
            record = make_history_record(result)
        except ValueError as exc:
            typer.echo(f"[ERROR] Cannot save to history: {exc}", err=True)
            raise typer.Exit(code=1)
        with _open_db(config) as conn:
            HistoryRepository(conn).upsert(record)
        typer.echo(f"\n[OK] Saved as {record.id}")


# ── History store ─────────────────────────────────────────────────────────────

@app.command("list-history")
def list_history(
    store: str = typer.Option(..., "--store", help="Store name."),
    period_type: Optional[str] = typer.Option(
        None,
        "--type",
        help="daily | weekly | monthly (default: all three).",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """List the saved snapshots of a store, oldest first."""
    from sales_oracle.db.repositories.history_repo import HistoryRepository
    from sales_oracle.models.history import HISTORY_TYPES
    from sales_oracle.reporting.formatters import format_history_list
    from sales_oracle.taxonomy.classification import PeriodType

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    if period_type is not None and period_type not in {t.value for t in HISTORY_TYPES}:
        typer.echo(f"[ERROR] --type must be daily, weekly or monthly, got '{period_type}'.", err=True)
        raise typer.Exit(code=1)

    with _open_db(config) as conn:
        repo = HistoryRepository(conn)
        if period_type is None:
            book = repo.load_book(store)
            records = [r for t in HISTORY_TYPES for r in book.records_for(t)]
        else:
            records = repo.list_for(store, PeriodType(period_type))

    typer.echo(format_history_list(records))


@app.command("delete-history")
def delete_history(
    record_id: str = typer.Argument(..., help="Record id, e.g. LOJACENTRO-2025-MONTHLY-01."),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Delete one saved snapshot."""
    from sales_oracle.db.repositories.history_repo import HistoryRepository

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    with _open_db(config) as conn:
        deleted = HistoryRepository(conn).delete(record_id)

    if not deleted:
        typer.echo(f"[ERROR] No history record with id '{record_id}'.", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"[OK] Deleted {record_id}")


# ── Evolution ─────────────────────────────────────────────────────────────────

@app.command("compare")
def compare(
    base: str = typer.Option(..., "--base", help="Record id of the base period (A)."),
    current: Optional[str] = typer.Option(
        None,
        "--current",
        help="Record id of the current period (B).",
    ),
    current_file: Optional[str] = typer.Option(
        None,
        "--current-file",
        help="Unsaved period JSON used as B instead of a saved record.",
    ),
    diagnosis: bool = typer.Option(
        False,
        "--diagnosis",
        help="Append the narrative strategic diagnosis.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Compare a saved base period with a saved or in-progress current period."""
    from sales_oracle.db.repositories.history_repo import HistoryRepository
    from sales_oracle.evolution.comparison import compare_periods
    from sales_oracle.reporting.formatters import format_comparison

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    if (current is None) == (current_file is None):
        typer.echo("[ERROR] Pass exactly one of --current or --current-file.", err=True)
        raise typer.Exit(code=1)

    current_data = None
    if current_file is not None:
        current_data = _process_with_history(config, _read_period_or_exit(current_file))

    with _open_db(config) as conn:
        repo = HistoryRepository(conn)
        base_record = repo.get(base)
        current_record = repo.get(current) if current is not None else None

    if base_record is None:
        typer.echo(f"[ERROR] No history record with id '{base}'.", err=True)
        raise typer.Exit(code=1)
    if current is not None and current_record is None:
        typer.echo(f"[ERROR] No history record with id '{current}'.", err=True)
        raise typer.Exit(code=1)

    result = compare_periods(base_record, current_record or current_data)
    typer.echo(format_comparison(result))
    if result.error is not None:
        raise typer.Exit(code=1)

    if diagnosis:
        typer.echo("")
        typer.echo(_narrative_service(config).strategic_diagnosis(result))


@app.command("history-trend")
def history_trend(
    store: str = typer.Option(..., "--store", help="Store name."),
    period_type: str = typer.Option("monthly", "--type", help="daily | weekly | monthly."),
    current_file: Optional[str] = typer.Option(
        None,
        "--current-file",
        help="Unsaved period JSON appended as the current cycle.",
    ),
    narrate: bool = typer.Option(
        False,
        "--narrate",
        help="Append the structured narrative history analysis.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Long-horizon trend, consistency and structural-risk report for a store."""
    from sales_oracle.db.repositories.history_repo import HistoryRepository
    from sales_oracle.evolution.history import analyze_history
    from sales_oracle.models.history import HISTORY_TYPES
    from sales_oracle.reporting.formatters import format_history_report
    from sales_oracle.taxonomy.classification import PeriodType

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    if period_type not in {t.value for t in HISTORY_TYPES}:
        typer.echo(f"[ERROR] --type must be daily, weekly or monthly, got '{period_type}'.", err=True)
        raise typer.Exit(code=1)

    current_data = None
    if current_file is not None:
        current_data = _process_with_history(config, _read_period_or_exit(current_file))

    with _open_db(config) as conn:
        records = HistoryRepository(conn).list_for(store, PeriodType(period_type))

    report = analyze_history(
        records, current_data, min_swing=config.history.min_trend_swing
    )
    narrative = _narrative_service(config).history_analysis(report) if narrate else None
    typer.echo(format_history_report(report, narrative))
    if report.error is not None:
        raise typer.Exit(code=1)
    if narrate and narrative is None:
        typer.echo("\n  [WARN] Narrative history analysis unavailable.")


# ── Seller feedback and narrative ─────────────────────────────────────────────

@app.command("feedback")
def feedback(
    input_file: str = typer.Argument(..., help="Period JSON (store + sellers)."),
    seller: str = typer.Option(..., "--seller", help="Seller name as in the input."),
    feedback_type: str = typer.Option(
        "Automatico",
        "--type",
        help="Automatico | Reconhecimento | Corretivo | Ajuste de Rota | Desenvolvimento.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Print the five-block feedback text for one seller."""
    from sales_oracle.feedback.templates import generate_feedback
    from sales_oracle.processing.intelligence import find_seller
    from sales_oracle.processing.labels import generate_period_label
    from sales_oracle.taxonomy.classification import FeedbackType

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    valid_types = [t.value for t in FeedbackType]
    if feedback_type not in valid_types:
        typer.echo(
            f"[ERROR] Unknown feedback type '{feedback_type}'. "
            f"Valid: {', '.join(valid_types)}",
            err=True,
        )
        raise typer.Exit(code=1)

    data = _read_period_or_exit(input_file)
    match = find_seller(data.sellers, seller)
    if match is None:
        typer.echo(f"[ERROR] Seller '{seller}' not found in {input_file}.", err=True)
        raise typer.Exit(code=1)

    label = generate_period_label(data.store.period)
    typer.echo(generate_feedback(match, label, FeedbackType(feedback_type)))


def _narrative_service(config):
    """Narrative service backed by the configured generator, or a disabled one."""
    from sales_oracle.narrative.base import NarrativeUnavailableError
    from sales_oracle.narrative.openai_client import OpenAINarrativeGenerator
    from sales_oracle.narrative.service import NarrativeService

    try:
        generator = OpenAINarrativeGenerator.from_config(config.narrative)
    except NarrativeUnavailableError as exc:
        typer.echo(f"  [WARN] {exc}", err=True)
        generator = None
    return NarrativeService(generator)


@app.command("narrate")
def narrate(
    input_file: str = typer.Argument(..., help="Period JSON (store + sellers)."),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Process a period and print the narrative executive analysis."""
    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    result = _process_with_history(config, _read_period_or_exit(input_file))
    if not result.ok:
        typer.echo(f"[ERROR] {result.error}", err=True)
        raise typer.Exit(code=1)
    typer.echo(_narrative_service(config).executive_analysis(result))


if __name__ == "__main__":
    app()
