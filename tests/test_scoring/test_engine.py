"""
Tests for sales_oracle/scoring/engine.py.

What we test
------------
Primitives:
  - pillar_note() caps at 100 and never goes negative.
  - spread_penalty() is 0.25 per point of note spread, capped at 15.
  - dependency_penalty() follows the 50% / 60% breakpoints, caps at 20 and
    is non-decreasing in the top-2 share.
  - zeros_penalty_seller() escalates 0/8/18/30.
  - team_zero_penalty() uses the worst pillar's zero share (>30% / >50%).
Rankings:
  - Top-2 by mercantil realized; a single seller leaves top-2 at 0.
Entity scores:
  - A store with every pillar on target and a spread-out team scores 100.
  - A seller with nothing sold scores 0 with a 30-point zeros penalty.
  - Over-achievement never lifts the score above the capped notes.
  - The unpenalised health index uses the raw ICMs and can pass 100.
  - Scores always stay within [0, 100].
"""

from __future__ import annotations

import pytest

from sales_oracle.models.entities import Pillar, Seller, SellerPillars, Store, StorePillars
from sales_oracle.scoring.engine import (
    dependency_penalty,
    pillar_note,
    seller_components,
    seller_score,
    spread_penalty,
    store_components,
    store_health_index,
    store_score,
    team_zero_penalty,
    top2_mercantil,
    top2_mercantil_share,
    zeros_penalty_seller,
)


# ── Helpers ────────────────────────────────────────────────────────────────────

def _seller(
    name: str = "Ana",
    merc: tuple[float, float] = (10000, 10000),
    cdc: tuple[float, float] = (4000, 4000),
    serv: tuple[float, float] = (1000, 1000),
) -> Seller:
    """Seller from (meta, realized) pairs."""
    return Seller(
        id=name.lower(),
        name=name,
        pillars=SellerPillars(
            mercantil=Pillar(meta=merc[0], realized=merc[1]),
            cdc=Pillar(meta=cdc[0], realized=cdc[1]),
            services=Pillar(meta=serv[0], realized=serv[1]),
        ),
    )


def _store(
    merc: tuple[float, float] = (40000, 40000),
    cdc: tuple[float, float] = (16000, 16000),
    serv: tuple[float, float] = (4000, 4000),
) -> Store:
    pillars = StorePillars.model_validate({
        "mercantil": {"meta": merc[0], "realized": merc[1]},
        "cdc": {"meta": cdc[0], "realized": cdc[1]},
        "services": {"meta": serv[0], "realized": serv[1]},
    })
    return Store(name="Loja Teste", pillars=pillars)


def _team(n: int = 4) -> list[Seller]:
    return [_seller(name=f"V{i}") for i in range(n)]


# ── Primitives ─────────────────────────────────────────────────────────────────

class TestPillarNote:
    def test_caps_at_100(self):
        assert pillar_note(15000, 10000) == 100.0

    def test_partial(self):
        assert pillar_note(8000, 10000) == pytest.approx(80.0)

    def test_zero_meta(self):
        assert pillar_note(8000, 0) == 0.0


class TestSpreadPenalty:
    def test_balanced_notes_no_penalty(self):
        assert spread_penalty(100, 100, 100) == 0.0

    def test_quarter_point_per_point(self):
        assert spread_penalty(100, 50, 100) == pytest.approx(12.5)

    def test_capped_at_15(self):
        assert spread_penalty(100, 0, 100) == 15.0


class TestDependencyPenalty:
    def test_half_share_is_free(self):
        assert dependency_penalty(25000, 25000, 100000) == 0.0

    def test_between_50_and_60(self):
        assert dependency_penalty(30000, 25000, 100000) == pytest.approx(5.0)

    def test_at_60(self):
        assert dependency_penalty(30000, 30000, 100000) == pytest.approx(10.0)

    def test_above_60_steeper(self):
        assert dependency_penalty(35000, 30000, 100000) == pytest.approx(20.0)

    def test_capped_at_20(self):
        assert dependency_penalty(60000, 40000, 100000) == 20.0

    def test_zero_total_uses_guard(self):
        # share = 0 / max(0, 1) = 0
        assert dependency_penalty(0, 0, 0) == 0.0

    def test_monotonic_in_share(self):
        shares = [0.3, 0.5, 0.52, 0.58, 0.6, 0.61, 0.65, 0.7, 1.0]
        penalties = [dependency_penalty(s * 100000, 0, 100000) for s in shares]
        assert penalties == sorted(penalties)


class TestZeroPenalties:
    @pytest.mark.parametrize(
        "values, expected",
        [
            ((1, 1, 1), 0.0),
            ((0, 1, 1), 8.0),
            ((0, 0, 1), 18.0),
            ((0, 0, 0), 30.0),
        ],
    )
    def test_seller_zeros(self, values, expected):
        assert zeros_penalty_seller(*values) == expected

    def test_team_zero_empty_team(self):
        assert team_zero_penalty([]) == 0.0

    def test_team_zero_below_30_percent(self):
        team = _team(3) + [_seller(name="Z", cdc=(4000, 0))]
        assert team_zero_penalty(team) == 0.0   # 1 of 4 = 25%

    def test_team_zero_above_30_percent(self):
        team = _team(2) + [_seller(name="Z", cdc=(4000, 0))]
        assert team_zero_penalty(team) == 10.0  # 1 of 3 = 33%

    def test_team_zero_above_half(self):
        team = [_seller(name="A"), _seller(name="B", serv=(1000, 0)), _seller(name="C", serv=(1000, 0))]
        assert team_zero_penalty(team) == 18.0

    def test_team_zero_uses_worst_pillar(self):
        # merc zero for 1/4, cdc zero for 3/4
        team = [
            _seller(name="A", merc=(10000, 0)),
            _seller(name="B", cdc=(4000, 0)),
            _seller(name="C", cdc=(4000, 0)),
            _seller(name="D", cdc=(4000, 0)),
        ]
        assert team_zero_penalty(team) == 18.0


# ── Rankings ───────────────────────────────────────────────────────────────────

class TestTop2:
    def test_orders_by_mercantil_realized(self):
        team = [
            _seller(name="A", merc=(10000, 5000)),
            _seller(name="B", merc=(10000, 20000)),
            _seller(name="C", merc=(10000, 12000)),
        ]
        assert top2_mercantil(team) == (20000, 12000)

    def test_single_seller(self):
        assert top2_mercantil([_seller(merc=(10000, 7000))]) == (7000, 0.0)

    def test_empty(self):
        assert top2_mercantil([]) == (0.0, 0.0)

    def test_share_ratio(self):
        store = _store(merc=(40000, 40000))
        assert top2_mercantil_share(store, _team(4)) == pytest.approx(0.5)


# ── Entity scores ──────────────────────────────────────────────────────────────

class TestStoreScore:
    def test_all_on_target_spread_team_scores_100(self):
        assert store_score(_store(), _team(4)) == pytest.approx(100.0)

    def test_health_index_all_on_target(self):
        assert store_health_index(_store()) == 100

    def test_health_index_uses_raw_icms(self):
        # 0.4*150 + 0.3*100 + 0.3*100
        assert store_health_index(_store(merc=(40000, 60000))) == 120

    def test_over_achievement_not_in_store_score(self):
        # capped notes: 0.4*100 + 0.3*100 + 0.3*100, spread 0
        assert store_score(_store(merc=(40000, 60000)), _team(4)) == pytest.approx(100.0)

    def test_components_sum(self):
        # 2 sellers hold everything: share 1.0 → dependency 20
        store = _store(merc=(40000, 40000))
        team = [_seller(name="A", merc=(20000, 20000)), _seller(name="B", merc=(20000, 20000))]
        c = store_components(store, team)
        assert c.dependency_penalty == 20.0
        assert c.zeros_penalty == 0.0
        assert c.total == pytest.approx(80.0)

    def test_clamped_at_zero(self):
        store = _store(merc=(40000, 1000), cdc=(16000, 0), serv=(4000, 0))
        team = [_seller(name="A", merc=(10000, 1000), cdc=(4000, 0), serv=(1000, 0))]
        assert store_score(store, team) == 0.0


class TestSellerScore:
    def test_all_zero_seller(self):
        s = _seller(merc=(10000, 0), cdc=(4000, 0), serv=(1000, 0))
        c = seller_components(s)
        assert c.zeros_penalty == 30.0
        assert c.total == 0.0

    def test_on_target(self):
        assert seller_score(_seller()) == pytest.approx(100.0)

    def test_unbalanced(self):
        # notes 100/50/100 → base 85, spread 12.5
        s = _seller(cdc=(4000, 2000))
        assert seller_score(s) == pytest.approx(72.5)

    def test_over_achievement_does_not_lift_score(self):
        s = _seller(merc=(10000, 30000))
        assert seller_score(s) == pytest.approx(100.0)

    def test_dependency_never_applies_to_sellers(self):
        c = seller_components(_seller())
        assert c.dependency_penalty == 0.0
        assert c.team_zero_penalty == 0.0

    @pytest.mark.parametrize("realized", [0, 1, 5000, 10000, 99999])
    def test_within_bounds(self, realized):
        s = _seller(merc=(10000, realized), cdc=(4000, realized / 3))
        assert 0.0 <= seller_score(s) <= 100.0
