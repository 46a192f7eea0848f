"""
Shared pytest fixtures for the Sales Oracle test suite.

Provides:
  - ``in_memory_db``: A fresh in-memory SQLite connection with the schema
    applied. Created anew for each test that requests it.
  - ``period_input``: A raw monthly period as the host application sends it
    (camelCase JSON, derived fields absent).
  - ``fixed_now``: A deterministic processing clock.
  - ``make_snapshot``: Factory for raw monthly snapshots whose store score
    is a closed-form function of the Mercantil ICM.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from typing import Any, Callable, Generator, Optional

import pytest

from sales_oracle.db.schema import apply_schema
from sales_oracle.models.oracle import OracleData


# ── Database fixture ──────────────────────────────────────────────────────────

@pytest.fixture
def in_memory_db() -> Generator[sqlite3.Connection, None, None]:
    """Yield a fresh in-memory SQLite connection with the schema applied.

    Connection is closed after the test.
    """
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    apply_schema(conn)
    yield conn
    conn.close()


# ── Sample inputs ─────────────────────────────────────────────────────────────

@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 2, 20, 18, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def period_input() -> dict[str, Any]:
    """Loja Centro, February 2025, 10 of 20 business days closed.

    Store pillars: Mercantil 90%, CDC 100%, Services 110%.
    Sellers: Ana (all pillars on target), Bruno (CDC at half),
    Carla (nothing sold).
    """
    return {
        "store": {
            "name": "Loja Centro",
            "period": {
                "type": "monthly",
                "month": 2,
                "year": 2025,
                "businessDaysTotal": 20,
                "businessDaysElapsed": 10,
            },
            "pillars": {
                "mercantil": {"meta": 100000, "realized": 90000},
                "cdc": {
                    "meta": 40000,
                    "realized": 40000,
                    "participation": {"meta": 30, "realized": 27},
                },
                "services": {
                    "meta": 10000,
                    "realized": 11000,
                    "efficiency": {"meta": 20, "realized": 20},
                },
                "operational": {
                    "cards": {"meta": 50, "realized": 40},
                    "combos": {"meta": 20, "realized": 20},
                },
            },
        },
        "sellers": [
            {
                "id": "s1",
                "name": "Ana",
                "pillars": {
                    "mercantil": {"meta": 30000, "realized": 30000},
                    "cdc": {"meta": 12000, "realized": 12000},
                    "services": {"meta": 3000, "realized": 3000},
                },
            },
            {
                "id": "s2",
                "name": "Bruno",
                "pillars": {
                    "mercantil": {"meta": 30000, "realized": 30000},
                    "cdc": {"meta": 12000, "realized": 6000},
                    "services": {"meta": 3000, "realized": 3000},
                },
            },
            {
                "id": "s3",
                "name": "Carla",
                "pillars": {
                    "mercantil": {"meta": 30000, "realized": 0},
                    "cdc": {"meta": 12000, "realized": 0},
                    "services": {"meta": 3000, "realized": 0},
                },
            },
        ],
    }


# ── Snapshot factory ──────────────────────────────────────────────────────────

SnapshotFactory = Callable[..., OracleData]


@pytest.fixture
def make_snapshot() -> SnapshotFactory:
    """Factory for raw monthly snapshots of "Loja Centro".

    The store's Mercantil meta is 40 000 and CDC / Services sit exactly on
    target, so the penalised store score depends only on ``merc_icm``::

        score = 0.4 * m + 60 - (100 - m) * 0.25     (m <= 100, share <= 50%)

    ``sellers`` equal sellers split the store's Mercantil realized evenly,
    giving a top-2 share of ``2 / sellers`` (no dependency penalty for 4+).
    ``seller_mercs`` overrides the team with named sellers and explicit
    Mercantil realized values.
    """

    def _make(
        merc_icm: float = 100.0,
        month: int = 1,
        sellers: int = 4,
        seller_mercs: Optional[dict[str, float]] = None,
        year: int = 2025,
        store_name: str = "Loja Centro",
    ) -> OracleData:
        merc_realized = 40000 * merc_icm / 100
        if seller_mercs is None:
            seller_mercs = {f"Vendedor {i + 1}": merc_realized / sellers for i in range(sellers)}
        team = [
            {
                "id": f"v{i + 1}",
                "name": name,
                "pillars": {
                    "mercantil": {"meta": 10000, "realized": merc},
                    "cdc": {"meta": 4000, "realized": 4000},
                    "services": {"meta": 1000, "realized": 1000},
                },
            }
            for i, (name, merc) in enumerate(seller_mercs.items())
        ]
        return OracleData.model_validate({
            "store": {
                "name": store_name,
                "period": {"type": "monthly", "month": month, "year": year},
                "pillars": {
                    "mercantil": {"meta": 40000, "realized": merc_realized},
                    "cdc": {"meta": 16000, "realized": 16000},
                    "services": {"meta": 4000, "realized": 4000},
                },
            },
            "sellers": team,
        })

    return _make
