"""Tests for config schema validation, loading and settings overrides."""

import json

import pytest
from pydantic import ValidationError

from valuation_engine.config.settings import Settings
from valuation_engine.methodology.loader import get_default_config, load_config
from valuation_engine.methodology.schema import (
    CategoryWeights,
    EngineConfig,
    IndustryMultipleRange,
)
from valuation_engine.models.enums import BriCategory


class TestCategoryWeights:
    def test_defaults_sum_to_one(self):
        weights = CategoryWeights()
        assert weights.total() == pytest.approx(1.0)
        assert weights.get(BriCategory.TRANSFERABILITY) == 0.20
        assert weights.get("legal_tax") == 0.10

    def test_within_tolerance_accepted(self):
        weights = CategoryWeights(financial=0.255)
        assert weights.total() == pytest.approx(1.005)

    def test_outside_tolerance_rejected(self):
        with pytest.raises(ValidationError, match="sum to ~1.0"):
            CategoryWeights(financial=0.30)

    def test_negative_weight_rejected(self):
        with pytest.raises(ValidationError):
            CategoryWeights(financial=-0.05, personal=0.40)

    def test_from_mapping_accepts_enum_keys(self):
        weights = CategoryWeights.from_mapping(
            {BriCategory.FINANCIAL: 0.30, BriCategory.MARKET: 0.10}
        )
        assert weights.financial == 0.30
        assert weights.market == 0.10


class TestIndustryMultipleRange:
    def test_median_defaults_to_midpoint(self):
        assert IndustryMultipleRange(low=3.0, high=6.0).median_multiple == 4.5

    def test_explicit_median(self):
        assert IndustryMultipleRange(low=3.0, high=6.0, median=4.0).median_multiple == 4.0

    def test_inverted_range_rejected(self):
        with pytest.raises(ValidationError, match="must be ordered"):
            IndustryMultipleRange(low=6.0, high=3.0)

    def test_median_outside_range_rejected(self):
        with pytest.raises(ValidationError, match="must lie within"):
            IndustryMultipleRange(low=3.0, high=6.0, median=7.0)

    def test_negative_rejected(self):
        with pytest.raises(ValidationError):
            IndustryMultipleRange(low=-1.0, high=6.0)


class TestEngineConfig:
    @pytest.mark.parametrize("alpha", [0.9, 2.1])
    def test_alpha_bounds(self, alpha):
        with pytest.raises(ValidationError):
            EngineConfig(alpha=alpha)

    def test_unanswered_score_bounds(self):
        with pytest.raises(ValidationError):
            EngineConfig(unanswered_category_score=1.5)


class TestLoader:
    def test_default_config(self):
        config = load_config()
        assert config.id == "exit-valuation"
        assert config.alpha == 1.4
        assert config.category_weights == CategoryWeights()
        assert config.global_weights is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.json")

    def test_custom_file(self, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"alpha": 1.5, "unanswered_category_score": 0.5}))
        config = load_config(path)
        assert config.alpha == 1.5
        assert config.unanswered_category_score == 0.5

    def test_invalid_file_rejected(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"category_weights": {"financial": 0.9}}))
        with pytest.raises(ValidationError):
            load_config(path)


class TestSettingsOverrides:
    def test_no_overrides(self):
        assert get_default_config(Settings()) == load_config()

    def test_alpha_override(self):
        config = get_default_config(Settings(default_alpha=1.5))
        assert config.alpha == 1.5

    def test_unanswered_score_override(self):
        config = get_default_config(Settings(unanswered_category_score=0.7))
        assert config.unanswered_category_score == 0.7

    def test_out_of_range_override_rejected(self):
        with pytest.raises(ValidationError):
            get_default_config(Settings(default_alpha=3.0))

    def test_methodology_path(self, tmp_path):
        path = tmp_path / "engine.json"
        path.write_text(json.dumps({"version": "2", "alpha": 1.3}))
        config = get_default_config(Settings(methodology_path=str(path)))
        assert config.version == "2"
        assert config.alpha == 1.3

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("VALUATION_DEFAULT_ALPHA", "1.55")
        assert Settings().default_alpha == 1.55
