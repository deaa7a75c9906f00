import math

import numpy as np
import pytest

from montana_wfm.forecast import (
    HOURLY_LOAD_PCT_DEFAULT,
    ForecastParams,
    expected_volume,
    forecast_day,
    half_hour_load_pct,
    required_agents,
)


def _peak_profile():
    # 7.2% at hour 15, the rest shares 92.8% evenly
    other = 92.8 / 23
    return [7.2 if h == 15 else other for h in range(24)]


def test_half_hour_split():
    pct = half_hour_load_pct(HOURLY_LOAD_PCT_DEFAULT)
    assert len(pct) == 48
    assert pct[30] == pytest.approx(3.6)
    assert pct[31] == pytest.approx(3.6)
    assert pct.sum() == pytest.approx(sum(HOURLY_LOAD_PCT_DEFAULT))


def test_half_hour_split_rejects_bad_profiles():
    with pytest.raises(ValueError):
        half_hour_load_pct([1.0] * 23)
    with pytest.raises(ValueError):
        half_hour_load_pct([-1.0] + [1.0] * 23)


def test_expected_volume_normalises_by_actual_sum():
    vols = expected_volume([2.0] * 24, 480)
    assert vols.sum() == pytest.approx(480)
    assert vols[0] == pytest.approx(10.0)


def test_zero_profile_gives_zero_volume():
    vols = expected_volume([0.0] * 24, 650)
    assert vols.sum() == 0
    assert required_agents(vols, 6, 0.85, 2).tolist() == [2] * 48


def test_peak_bucket_requirement():
    vols = expected_volume(_peak_profile(), 650)
    assert vols[30] == pytest.approx(650 * 0.036)

    req = required_agents(vols, aht_min=6, occupancy=0.85, service_buffer=0)
    assert req[30] == math.ceil(650 * 0.036 * 6 / (30 * 0.85)) == 6

    req_buf = required_agents(vols, aht_min=6, occupancy=0.85, service_buffer=2)
    assert req_buf[30] == 8


def test_default_profile_peak_bucket():
    fc = forecast_day(ForecastParams(), "Monday")
    assert len(fc.required) == 48
    assert fc.required[30] == 6
    assert fc.required.max() == 6


def test_required_sum_non_decreasing_in_buffer():
    vols = expected_volume(HOURLY_LOAD_PCT_DEFAULT, 650)
    totals = [int(required_agents(vols, 6, 0.85, b).sum()) for b in range(5)]
    assert totals == sorted(totals)
    assert totals[1] - totals[0] == 48


def test_zero_occupancy_uses_denominator_floor():
    vols = np.full(48, 1.0)
    req = required_agents(vols, aht_min=6, occupancy=0.0)
    assert req[0] == math.ceil(6 / 0.1)


def test_required_agents_rejects_bad_inputs():
    vols = np.ones(48)
    with pytest.raises(ValueError):
        required_agents(vols, aht_min=0, occupancy=0.85)
    with pytest.raises(ValueError):
        required_agents(vols, aht_min=6, occupancy=0.85, service_buffer=-1)


def test_forecast_params_validation():
    with pytest.raises(ValueError):
        ForecastParams(aht_min=0)
    with pytest.raises(ValueError):
        ForecastParams(service_buffer=-1)
    with pytest.raises(ValueError):
        ForecastParams(hourly_pct_by_day={"Monday": [1.0] * 10})


def test_forecast_day_uses_weekday_inputs():
    params = ForecastParams(daily_avg={"Friday": 0.0})
    fc = forecast_day(params, "Friday")
    assert fc.expected.sum() == 0
    assert fc.required.sum() == 0

    other = forecast_day(params, "Monday")
    assert other.expected.sum() == pytest.approx(650)
