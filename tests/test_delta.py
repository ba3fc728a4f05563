"""Tests for snapshot-to-snapshot deltas."""

import pytest
from conftest import make_response

from valuation_engine.engine.delta import compute_delta
from valuation_engine.models.company import ValuationInputs


class TestComputeDelta:
    def test_identical_snapshots(self, engine, config, valuation_inputs):
        snapshot = engine.calculate(valuation_inputs, config)
        delta = compute_delta(snapshot, snapshot)
        assert delta.previous_snapshot_id == snapshot.snapshot_id
        assert delta.bri_score_change == 0.0
        assert delta.current_value_change == 0.0
        assert set(delta.category_changes.values()) == {0.0}

    def test_category_added(self, engine, config, multiples):
        before = engine.calculate(
            ValuationInputs(
                multiples=multiples,
                response_lists=[[make_response("q1", category="FINANCIAL", score=0.5)]],
            ),
            config,
        )
        after = engine.calculate(
            ValuationInputs(
                multiples=multiples,
                response_lists=[
                    [
                        make_response("q1", category="FINANCIAL", score=0.5),
                        make_response("q2", category="MARKET", score=0.8),
                    ]
                ],
            ),
            config,
        )
        delta = compute_delta(before, after)
        assert delta.category_changes["FINANCIAL"] == pytest.approx(0.0)
        assert delta.category_changes["MARKET"] == pytest.approx(0.8)
        assert delta.bri_score_change == pytest.approx(0.8 * 0.15)

    def test_category_dropped_counts_as_zero(self, engine, config, multiples):
        before = engine.calculate(
            ValuationInputs(
                multiples=multiples,
                response_lists=[[make_response("q1", category="LEGAL_TAX", score=0.6)]],
            ),
            config,
        )
        after = engine.calculate(ValuationInputs(multiples=multiples), config)
        assert compute_delta(before, after).category_changes == {"LEGAL_TAX": pytest.approx(-0.6)}
