from datetime import timedelta

import pytest

from conftest import START
from floodwatch.core.exceptions import InvalidForecastParameter
from floodwatch.core.forecast import (
    ForecastGenerator,
    HistoryContext,
    NoNoise,
    SeededNoise,
    SinusoidalNoise,
    build_noise,
    generate_forecast,
    historical_points,
    probability_risk_level,
    river_intensity,
    terrain_points,
    trend_multiplier,
)
from floodwatch.core.historical import HistoricalAggregator
from floodwatch.core.models import HistoricalRainfallRecord, RiskLevel, RiverReading


def river(current=5.0, trend="stable"):
    return RiverReading("Ganga", current, danger_level=10.0, warning_level=8.5, normal_level=5.0, trend=trend)


class TestGenerate:
    @pytest.mark.parametrize("days", [1, 3, 10, 30])
    def test_length_and_bounds(self, generator, days):
        forecast = generator.generate("Mumbai", "severe", 95, 100, days)
        assert len(forecast) == days
        for day in forecast:
            assert 5 <= day.probability <= 95
            assert 25 <= day.confidence <= 95

    def test_consecutive_dates_from_start(self, generator):
        forecast = generator.generate("Delhi", "high", 60, 50, 5)
        assert [d.date for d in forecast] == [START + timedelta(days=i) for i in range(5)]
        assert [d.day_index for d in forecast] == list(range(5))

    def test_explicit_start_date(self, generator):
        start = START + timedelta(days=40)
        assert generator.generate("Delhi", "high", 60, 50, 2, start_date=start)[0].date == start

    def test_known_values_with_fallback_factors(self, generator):
        day0, day1 = generator.generate("Jaipur", "low", None, None, 2)
        assert day0.factors.rainfall == 16.0
        assert day0.factors.reservoir == 10.5
        assert day0.factors.ground_saturation == 9.5
        assert day0.factors.historical_pattern == 8.0
        assert day0.factors.seasonal_terrain == 11.0
        assert day0.probability == pytest.approx(28.8, abs=0.1)
        assert day1.probability == pytest.approx(29.0, abs=0.1)
        assert day0.risk_level == RiskLevel.LOW
        assert day0.expected_rainfall_mm == pytest.approx(18.7, abs=0.1)

    def test_factors_within_caps(self, generator):
        for day in generator.generate("Kochi", "severe", 100, 100, 30):
            f = day.factors
            assert 0 <= f.rainfall <= 40
            assert 0 <= f.reservoir <= 35
            assert 0 <= f.ground_saturation <= 25
            assert 0 <= f.historical_pattern <= 20
            assert 0 <= f.seasonal_terrain <= 15

    def test_daily_risk_level_follows_probability(self, generator):
        for day in generator.generate("Mumbai", "medium", 70, 70, 10):
            assert day.risk_level == probability_risk_level(day.probability)

    def test_deterministic(self):
        a = ForecastGenerator(noise=SinusoidalNoise(), today=lambda: START)
        b = ForecastGenerator(noise=SinusoidalNoise(), today=lambda: START)
        assert a.generate("Patna", "high", 80, 60, 10) == b.generate("Patna", "high", 80, 60, 10)

    def test_higher_risk_level_raises_probability(self, generator):
        low = generator.generate("Surat", "low", 50, 50, 1)[0]
        severe = generator.generate("Surat", "severe", 50, 50, 1)[0]
        assert severe.probability > low.probability

    def test_unknown_risk_level_is_treated_as_low(self, generator):
        assert generator.generate("Surat", "bogus", 50, 50, 3) == generator.generate("Surat", RiskLevel.LOW, 50, 50, 3)

    @pytest.mark.parametrize("days", [0, -1, 2.5, "3", True, None])
    def test_invalid_days(self, generator, days):
        with pytest.raises(InvalidForecastParameter):
            generator.generate("Mumbai", "high", 50, 50, days)

    def test_invalid_days_is_value_error(self, generator):
        with pytest.raises(ValueError):
            generator.generate("Mumbai", "high", 50, 50, 0)

    def test_malformed_factors_do_not_raise(self, generator):
        forecast = generator.generate("Mumbai", "high", "n/a", float("nan"), 3)
        assert len(forecast) == 3


class TestConfidence:
    def test_decays_daily_with_penalties(self, generator):
        forecast = generator.generate("Jaipur", "low", None, None, 12)
        assert [d.confidence for d in forecast[:3]] == [80.0, 74.0, 68.0]
        assert forecast[-1].confidence == 25.0

    def test_full_data_has_no_penalty(self, generator):
        history = HistoryContext(record_count=24, average_rainfall_mm=120.0)
        forecast = generator.generate("Jaipur", "low", 40, 40, 2, history=history)
        assert [d.confidence for d in forecast] == [95.0, 89.0]

    def test_sparse_history_penalty(self, generator):
        history = HistoryContext(record_count=3, average_rainfall_mm=120.0)
        assert generator.generate("Jaipur", "low", 40, 40, 1, history=history)[0].confidence == 85.0


class TestHistoryAndRiver:
    def test_expected_rainfall_uses_history_average(self, generator):
        history = HistoryContext(record_count=24, average_rainfall_mm=200.0)
        day = generator.generate("Jaipur", "low", 40, 40, 1, history=history)[0]
        assert day.expected_rainfall_mm == pytest.approx(day.probability / 100 * 200.0 * 1.3, abs=0.06)

    def test_history_from_canonical_pattern_counts_as_missing(self):
        pattern = HistoricalAggregator([]).resolve("Chennai", 2024)
        history = HistoryContext.from_pattern(pattern)
        assert history.record_count == 0
        assert history.average_rainfall_mm is None

    def test_partial_year_history_averages_sampled_months(self, generator):
        records = [HistoricalRainfallRecord("Pune", 2024, m, 100.0) for m in range(1, 7)]
        pattern = HistoricalAggregator(records).resolve("Pune", 2024)
        assert pattern.average_rainfall_mm == 50.0
        assert pattern.sampled_average_mm == 100.0

        history = HistoryContext.from_pattern(pattern)
        assert history.average_rainfall_mm == 100.0
        day = generator.generate("Pune", "high", 60, 60, 1, history=history)[0]
        assert day.expected_rainfall_mm == pytest.approx(day.probability / 100 * 100.0 * 1.3, abs=0.06)

    def test_historical_points(self):
        assert historical_points("Jaipur", "Rajasthan", None) == 8.0
        assert historical_points("Jaipur", "Rajasthan", HistoryContext(12, 150.0)) == 7.0
        assert historical_points("Patna", "Bihar", HistoryContext(12, 350.0)) == 20.0

    def test_river_change_only_with_river(self, generator):
        without = generator.generate("Patna", "high", 60, 60, 2)
        with_river = generator.generate("Patna", "high", 60, 60, 2, river=river())
        assert all(d.river_level_change_m is None for d in without)
        for d in with_river:
            assert d.river_level_change_m == round(d.probability / 100 * 1.5, 2)

    def test_river_intensity(self):
        assert river_intensity(river(5.0)) == 50.0
        assert river_intensity(river(5.0, "rising")) == pytest.approx(65.0)
        assert river_intensity(river(5.0, "falling")) == pytest.approx(40.0)
        assert river_intensity(river(12.0, "rising")) == 100.0

    def test_rising_river_raises_reservoir_factor(self, generator):
        calm = generator.generate("Patna", "high", 20, 60, 1)[0]
        flooding = generator.generate("Patna", "high", 20, 60, 1, river=river(9.5, "rising"))[0]
        assert flooding.factors.reservoir > calm.factors.reservoir


class TestTrendAndNoise:
    def test_trend_shapes(self):
        assert trend_multiplier(RiskLevel.SEVERE, 0) == pytest.approx(1.3)
        assert trend_multiplier(RiskLevel.SEVERE, 20) == pytest.approx(0.8)
        assert trend_multiplier(RiskLevel.HIGH, 4) == pytest.approx(1.25)
        assert trend_multiplier(RiskLevel.HIGH, 0) < trend_multiplier(RiskLevel.HIGH, 4)
        assert trend_multiplier(RiskLevel.MEDIUM, 0) == pytest.approx(1.0)
        assert trend_multiplier(RiskLevel.LOW, 7) == 0.75

    def test_sinusoidal_noise_is_pure(self):
        noise = SinusoidalNoise(amplitude=3.0)
        assert noise(0) == 0.0
        assert noise(5) == noise(5)
        assert all(abs(noise(d)) <= 3.0 for d in range(30))

    def test_seeded_noise_reproducible(self):
        assert SeededNoise(seed=7)(3) == SeededNoise(seed=7)(3)
        assert all(abs(SeededNoise(seed=7)(d)) <= 3.0 for d in range(30))
        assert [SeededNoise(seed=1)(d) for d in range(5)] != [SeededNoise(seed=2)(d) for d in range(5)]

    def test_build_noise(self):
        assert isinstance(build_noise("none"), NoNoise)
        assert isinstance(build_noise("Sinusoidal"), SinusoidalNoise)
        assert build_noise("seeded", seed=9) == SeededNoise(seed=9)
        with pytest.raises(ValueError):
            build_noise("gaussian")

    def test_terrain_points(self):
        assert terrain_points("Mumbai") == 12.0
        assert terrain_points("Dehradun") == 10.0
        assert terrain_points("Nowhere") == 5.0


def test_generate_forecast_module_function():
    forecast = generate_forecast("Chennai", "severe", 90, 80, 10)
    assert len(forecast) == 10
    assert all(5 <= d.probability <= 95 for d in forecast)
