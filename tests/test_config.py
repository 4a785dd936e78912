"""
Tests for configuration loading and validation.
"""

import pytest
from pathlib import Path
from pydantic import ValidationError

from sediment_monitor.config import (
    PipelineConfig, FilterSettings, DerivationSettings, CalibrationSettings
)


class TestPipelineConfig:
    """Test suite for PipelineConfig."""

    def test_default_yaml_loads(self):
        config_path = Path(__file__).parent.parent / "config" / "default.yaml"

        config = PipelineConfig.from_yaml(config_path)

        assert config.filters.depth_window == 5
        assert config.filters.turbidity_window == 5
        assert config.filters.temperature_window == 3
        assert config.derivation.z_score_threshold == 3.0
        assert config.derivation.processing_method == "moving_average"
        assert Path(config.paths.data_raw).is_absolute()

    def test_missing_file(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            PipelineConfig.from_yaml(temp_dir / "nope.yaml")

    def test_sections_default(self):
        config = PipelineConfig(
            pipeline={"name": "p", "version": "1"},
            paths={"data_raw": "/tmp/raw", "data_processed": "/tmp/processed"}
        )

        assert config.paths.calibration_db == ":memory:"
        assert config.filters.lifetime == "session"
        assert config.calibration.table == "sensor_calibration"
        assert "captured_at" in config.data_schema.expected_columns

    def test_unknown_keys_rejected(self):
        with pytest.raises(ValidationError):
            PipelineConfig(
                pipeline={"name": "p", "version": "1"},
                paths={"data_raw": "/tmp/raw", "data_processed": "/tmp/processed"},
                smoothing={"window": 5}
            )

    @pytest.mark.parametrize("field", ["depth_window", "turbidity_window", "temperature_window"])
    def test_non_positive_window_rejected(self, field):
        with pytest.raises(ValidationError):
            FilterSettings(**{field: 0})

    def test_unknown_lifetime_rejected(self):
        with pytest.raises(ValidationError):
            FilterSettings(lifetime="forever")

    def test_derivation_defaults(self):
        settings = DerivationSettings()

        assert settings.sediment_turbidity_weight == 0.8
        assert settings.sediment_depth_weight == 0.2
        assert settings.quality_signal_weight == 0.7
        assert settings.quality_battery_weight == 0.3
        assert settings.quality_cap == 1.0

    @pytest.mark.parametrize("cap", [0.0, -0.5, 1.5])
    def test_quality_cap_out_of_range_rejected(self, cap):
        """The cap must keep scores inside the persisted [0, 1] range."""
        with pytest.raises(ValidationError):
            DerivationSettings(quality_cap=cap)

    def test_lookup_workers_must_be_positive(self):
        with pytest.raises(ValidationError):
            CalibrationSettings(lookup_workers=0)
