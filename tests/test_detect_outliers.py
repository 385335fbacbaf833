import numpy as np
import pandas as pd
import pytest

from delay_pipeline.detect_outliers import compute_iqr_fence, summarize_outliers


def delivered_with(lead_times):
    return pd.DataFrame({
        'order_id': [f'o{i}' for i in range(len(lead_times))],
        'lead_time_days': lead_times,
    })


def test_fence_and_extreme_rate():
    summary = summarize_outliers(delivered_with([5, 8, 10, 12, 15, 100]))

    assert summary['p25'] == pytest.approx(8.5)
    assert summary['p50'] == pytest.approx(11.0)
    assert summary['p75'] == pytest.approx(14.25)
    assert summary['iqr_days'] == pytest.approx(5.75)
    assert summary['upper_fence_days'] == pytest.approx(22.875)
    assert summary['extreme_delay_orders'] == 1
    assert summary['total_orders'] == 6
    assert summary['extreme_delay_rate'] == pytest.approx(1 / 6)


def test_quartiles_interpolate_linearly():
    fence = compute_iqr_fence(pd.Series([1, 2, 3, 4]))

    assert fence['p25'] == pytest.approx(1.75)
    assert fence['p75'] == pytest.approx(3.25)


def test_fence_grows_with_spread_at_fixed_p25():
    narrow = compute_iqr_fence(pd.Series([0, 10, 20, 30, 40]))
    wide = compute_iqr_fence(pd.Series([0, 10, 20, 50, 60]))

    assert narrow['p25'] == wide['p25']
    assert wide['p75'] > narrow['p75']
    assert wide['upper_fence_days'] > narrow['upper_fence_days']


def test_no_rows_are_removed():
    delivered = delivered_with([1, 2, 3, 1000])

    summarize_outliers(delivered)

    assert len(delivered) == 4


def test_extreme_rate_stays_in_unit_interval():
    summary = summarize_outliers(delivered_with([-3, 0, 1, 1, 2, 200, 300]))

    assert 0 <= summary['extreme_delay_rate'] <= 1


def test_empty_base_marks_rate_undefined():
    summary = summarize_outliers(delivered_with([]))

    assert summary['extreme_delay_orders'] == 0
    assert np.isnan(summary['extreme_delay_rate'])
    assert summary['extreme_delay_rate_defined'] is False
