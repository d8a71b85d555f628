"""Tests for configuration loading and validation."""

import pytest
import yaml

from forgebench.config import (
    ConfigFileNotFoundError,
    ConfigParseError,
    ConfigValidationError,
    ForgebenchConfig,
    HeadlineConfig,
    MetricThresholds,
    SeverityPalette,
    SeverityTier,
    StrategyColors,
    generate_example_config_yaml,
    load_config,
    save_config,
    validate_config,
)
from forgebench.matrix import MetricName, StrategyId


class TestMetricThresholds:
    """Tests for MetricThresholds model."""

    def test_higher_is_better_default(self):
        t = MetricThresholds(good=90, warning=50)
        assert t.lower_is_better is False

    def test_higher_is_better_order(self):
        with pytest.raises(ValueError, match="good >= warning"):
            MetricThresholds(good=50, warning=90)

    def test_lower_is_better_order(self):
        with pytest.raises(ValueError, match="good <= warning"):
            MetricThresholds(good=500, warning=50, lower_is_better=True)

    def test_equal_cutoffs_allowed(self):
        MetricThresholds(good=10, warning=10)
        MetricThresholds(good=10, warning=10, lower_is_better=True)

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError):
            MetricThresholds(good=1, warning=1, critical=0)


class TestColors:
    """Tests for color token models."""

    def test_strategy_defaults(self):
        colors = StrategyColors()
        assert colors.color_for(StrategyId.SINGLE) == "#3b9ab2"
        assert colors.color_for("thread_pool") == "#f21a00"

    def test_hex_lowercased(self):
        assert StrategyColors(single="#ABCDEF").single == "#abcdef"

    @pytest.mark.parametrize("color", ["red", "#fff", "#gggggg", "3b9ab2"])
    def test_invalid_color_rejected(self, color):
        with pytest.raises(ValueError, match="hex"):
            StrategyColors(single=color)

    def test_severity_palette(self):
        palette = SeverityPalette()
        assert palette.color_for(SeverityTier.GOOD) == "#10b981"
        assert palette.color_for(SeverityTier.BAD) == "#ef4444"
        assert palette.color_for(None) == palette.neutral


class TestHeadlineConfig:
    """Tests for HeadlineConfig model."""

    def test_defaults(self):
        h = HeadlineConfig()
        assert h.featured is StrategyId.THREAD_POOL
        assert h.gain_baseline is StrategyId.THREAD_PER_REQUEST
        assert h.reliability_baseline is StrategyId.SINGLE
        assert h.level == 1000

    def test_baseline_equal_to_featured_rejected(self):
        with pytest.raises(ValueError, match="must differ"):
            HeadlineConfig(featured="single", reliability_baseline="single")

    def test_level_must_be_positive(self):
        with pytest.raises(ValueError):
            HeadlineConfig(level=0)


class TestForgebenchConfig:
    """Tests for ForgebenchConfig model."""

    def test_defaults(self):
        cfg = ForgebenchConfig()
        assert cfg.name == "httpforge"
        assert cfg.version == 1
        assert cfg.comparison_level == 1000
        assert set(cfg.thresholds) == set(MetricName)

    def test_default_thresholds(self):
        cfg = ForgebenchConfig()
        assert cfg.thresholds_for(MetricName.THROUGHPUT) == MetricThresholds(good=2000, warning=500)
        assert cfg.thresholds_for("p99_latency").lower_is_better is True

    def test_partial_thresholds_merge_with_defaults(self):
        cfg = ForgebenchConfig(thresholds={"throughput": {"good": 3000, "warning": 1000}})
        assert cfg.thresholds_for("throughput").good == 3000
        assert cfg.thresholds_for("success_rate").good == 99
        assert len(cfg.thresholds) == len(MetricName)

    def test_unknown_threshold_metric_rejected(self):
        with pytest.raises(ValueError):
            ForgebenchConfig(thresholds={"cpu": {"good": 1, "warning": 1}})

    def test_invalid_bucket_color_rejected(self):
        with pytest.raises(ValueError, match="hex"):
            ForgebenchConfig(bucket_colors={"c10": "blue"})

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError):
            ForgebenchConfig(colour="red")

    def test_comparison_level_positive(self):
        with pytest.raises(ValueError):
            ForgebenchConfig(comparison_level=-1)


class TestLoader:
    """Tests for configuration file loading."""

    def test_none_returns_defaults(self):
        assert load_config(None) == ForgebenchConfig()

    def test_load_file(self, tmp_path):
        p = tmp_path / "forgebench.yaml"
        p.write_text("name: staging\ncomparison_level: 100\n")
        cfg = load_config(p)
        assert cfg.name == "staging"
        assert cfg.comparison_level == 100

    def test_empty_file_is_default(self, tmp_path):
        p = tmp_path / "forgebench.yaml"
        p.write_text("")
        assert load_config(p) == ForgebenchConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigFileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        p = tmp_path / "bad.yaml"
        p.write_text("name: [unclosed\n")
        with pytest.raises(ConfigParseError):
            load_config(p)

    def test_undecodable_file(self, tmp_path):
        p = tmp_path / "binary.yaml"
        p.write_bytes(b"\xff\xfe\x00name")
        with pytest.raises(ConfigParseError):
            load_config(p)

    def test_directory_path(self, tmp_path):
        with pytest.raises(ConfigParseError):
            load_config(tmp_path)

    def test_non_mapping(self, tmp_path):
        p = tmp_path / "list.yaml"
        p.write_text("- a\n")
        with pytest.raises(ConfigParseError):
            load_config(p)

    def test_validation_errors_collected(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            validate_config(
                {
                    "comparison_level": 0,
                    "thresholds": {"throughput": {"good": 1, "warning": 5}},
                }
            )
        err = exc_info.value
        assert len(err.errors) == 2
        assert "comparison_level" in str(err)

    def test_save_and_reload(self, tmp_path):
        cfg = ForgebenchConfig(
            name="custom",
            thresholds={"p50_latency": {"good": 10, "warning": 100, "lower_is_better": True}},
        )
        p = tmp_path / "saved.yaml"
        save_config(cfg, p)
        data = yaml.safe_load(p.read_text())
        assert data["thresholds"]["p50_latency"]["good"] == 10
        assert load_config(p) == cfg

    def test_example_config_is_valid(self, tmp_path):
        p = tmp_path / "example.yaml"
        p.write_text(generate_example_config_yaml())
        assert load_config(p) == ForgebenchConfig()
