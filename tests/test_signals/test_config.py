"""
Tests for indicator configuration.
"""
import pytest

from techanalysis.shared.defaults import MA_PERIODS, MACD_FAST, RSI_PERIOD
from techanalysis.signals.config import (
    ADXConfig,
    BollingerBandsConfig,
    IndicatorConfig,
    MACDConfig,
    MovingAveragesConfig,
    RSIConfig,
    StochasticConfig,
    VolumeConfig,
    WilliamsRConfig,
    merge_config,
)


class TestIndicatorConfig:
    """Default configuration enables every family."""

    def test_defaults_use_centralized_values(self):
        config = IndicatorConfig()

        assert config.rsi.period == RSI_PERIOD
        assert config.macd.fast_period == MACD_FAST
        assert config.moving_averages.periods == MA_PERIODS

    def test_all_families_enabled(self):
        assert IndicatorConfig().enabled() == (
            "rsi", "macd", "bollinger_bands", "moving_averages",
            "stochastic", "williams_r", "adx", "volume",
        )

    def test_none_disables(self):
        config = IndicatorConfig(adx=None, volume=None)
        assert "adx" not in config.enabled()
        assert "volume" not in config.enabled()

    def test_instances_do_not_share_sub_configs(self):
        assert IndicatorConfig().rsi is not IndicatorConfig().rsi


class TestConfigValidation:
    """Config validation fails fast with clear errors."""

    def test_rsi_oversold_must_be_less_than_overbought(self):
        with pytest.raises(ValueError, match="RSI oversold.*must be less than overbought"):
            RSIConfig(overbought=25, oversold=80)

    @pytest.mark.parametrize("period", [0, -5, 2.5, True])
    def test_rsi_period_must_be_positive_integer(self, period):
        with pytest.raises(ValueError, match="RSI period must be an integer >= 1"):
            RSIConfig(period=period)

    def test_macd_fast_must_be_less_than_slow(self):
        with pytest.raises(ValueError, match="MACD fast_period.*must be less than slow_period"):
            MACDConfig(fast_period=26, slow_period=12)

    def test_bollinger_std_devs_must_be_positive(self):
        with pytest.raises(ValueError, match="standard_deviations must be > 0"):
            BollingerBandsConfig(standard_deviations=0)

    def test_moving_average_periods(self):
        with pytest.raises(ValueError, match="must not be empty"):
            MovingAveragesConfig(periods=())
        with pytest.raises(ValueError, match="Moving average period"):
            MovingAveragesConfig(periods=(20, 0))

    def test_moving_average_periods_become_tuple(self):
        assert MovingAveragesConfig(periods=[5, 10]).periods == (5, 10)

    def test_stochastic_thresholds(self):
        with pytest.raises(ValueError, match="Stochastic thresholds"):
            StochasticConfig(overbought=20, oversold=80)

    def test_williams_r_thresholds_are_negative(self):
        with pytest.raises(ValueError, match="Williams %R thresholds"):
            WilliamsRConfig(overbought=20, oversold=80)
        WilliamsRConfig(overbought=-10, oversold=-90)

    def test_adx_strong_trend_range(self):
        with pytest.raises(ValueError, match="ADX strong_trend"):
            ADXConfig(strong_trend=100)

    def test_volume_min_periods(self):
        with pytest.raises(ValueError, match="Volume min_periods"):
            VolumeConfig(min_periods=0)


class TestMergeConfig:

    def test_none_gives_defaults(self):
        assert merge_config(None) == IndicatorConfig()

    def test_partial_section_keeps_other_defaults(self):
        config = merge_config({"rsi": {"period": 7}})

        assert config.rsi.period == 7
        assert config.rsi.overbought == RSIConfig().overbought
        assert config.macd == MACDConfig()

    def test_section_set_to_none_disables(self):
        config = merge_config({"macd": None})
        assert config.macd is None
        assert config.rsi is not None

    def test_enabled_false_disables(self):
        config = merge_config({"williams_r": {"enabled": False, "period": 10}})
        assert config.williams_r is None

    def test_enabled_true_is_accepted(self):
        config = merge_config({"adx": {"enabled": True, "period": 10}})
        assert config.adx.period == 10

    def test_config_object_is_copied(self):
        original = IndicatorConfig(rsi=None)
        merged = merge_config(original)
        assert merged == original
        assert merged is not original

    def test_sub_configs_are_copied(self):
        rsi = RSIConfig(period=14)
        merged = merge_config(IndicatorConfig(rsi=rsi))
        rsi.period = 0

        assert merged.rsi is not rsi
        assert merged.rsi.period == 14

    def test_sub_config_in_mapping_is_copied(self):
        stochastic = StochasticConfig(k_period=5)
        merged = merge_config({"stochastic": stochastic})
        stochastic.k_period = 0
        assert merged.stochastic.k_period == 5

    def test_sub_config_instance_accepted(self):
        config = merge_config({"stochastic": StochasticConfig(k_period=5)})
        assert config.stochastic.k_period == 5

    def test_unknown_section(self):
        with pytest.raises(ValueError, match="Unknown indicator section"):
            merge_config({"ichimoku": {}})

    def test_unknown_option(self):
        with pytest.raises(ValueError, match="Unknown rsi option"):
            merge_config({"rsi": {"length": 14}})

    def test_invalid_value_propagates(self):
        with pytest.raises(ValueError, match="MACD fast_period"):
            merge_config({"macd": {"fast_period": 30}})

    def test_non_mapping_rejected(self):
        with pytest.raises(ValueError, match="must be a mapping"):
            merge_config(["rsi"])
        with pytest.raises(ValueError, match="Config section 'rsi' must be a mapping"):
            merge_config({"rsi": 14})
