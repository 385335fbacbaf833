# =============================================================================
# LEAD TIME OUTLIERS (IQR METHOD)
# =============================================================================
# - Quartiles by linear interpolation (PERCENTILE_CONT semantics)
# - Tukey upper fence only: the concern is late delivery, not early
# - Summary record; no rows are removed from downstream stages


from typing import Dict
import numpy as np
import pandas as pd

from delay_pipeline.settings import IQR_MULTIPLIER


def compute_iqr_fence(lead_times: pd.Series,
                      multiplier: float = IQR_MULTIPLIER
                      ) -> Dict[str, float]:
    """
    P25 / P50 / P75, IQR and upper fence = P75 + multiplier * IQR.
    """

    values = pd.Series(lead_times, dtype='float64').dropna()

    if values.empty:
        return {
            'p25': np.nan,
            'p50': np.nan,
            'p75': np.nan,
            'iqr_days': np.nan,
            'upper_fence_days': np.nan,
        }

    p25, p50, p75 = values.quantile([0.25, 0.5, 0.75], interpolation='linear')
    iqr = p75 - p25

    return {
        'p25': float(p25),
        'p50': float(p50),
        'p75': float(p75),
        'iqr_days': float(iqr),
        'upper_fence_days': float(p75 + multiplier * iqr),
    }


def summarize_outliers(delivered: pd.DataFrame,
                       multiplier: float = IQR_MULTIPLIER
                       ) -> Dict[str, object]:
    """
    Fence summary plus count and rate of extreme-delay orders.
    """

    lead_time = delivered['lead_time_days']
    fence = compute_iqr_fence(lead_time, multiplier)

    total = len(delivered)
    extreme = int((lead_time > fence['upper_fence_days']).sum())

    return {
        **fence,
        'extreme_delay_orders': extreme,
        'total_orders': total,
        'extreme_delay_rate': extreme / total if total else np.nan,
        'extreme_delay_rate_defined': total > 0,
    }


# =============================================================================
# END OF SCRIPT
# =============================================================================
