# =============================================================================
# ROUTE BENCHMARK AGAINST GLOBAL DELAY RATE
# =============================================================================
# - Global delay rate over every order with a resolvable route
# - Expected vs observed delays per supported route: excess and lift
# - Two prioritization lenses: absolute excess delays and relative lift


from typing import Dict
import numpy as np
import pandas as pd

from delay_pipeline.settings import TOP_N_EXCESS_ROUTES


def compute_global_delay_rate(route_base: pd.DataFrame) -> Dict[str, object]:
    """
    Mean of is_delayed over the whole route base (no support gate).
    """

    volume = len(route_base)
    delayed = int(route_base['is_delayed'].sum())

    return {
        'order_volume': volume,
        'delayed_orders': delayed,
        'global_delay_rate': delayed / volume if volume else np.nan,
        'global_delay_rate_defined': volume > 0,
    }


def benchmark_routes(route_stats: pd.DataFrame,
                     global_delay_rate: float
                     ) -> pd.DataFrame:
    """
    Add expected_delays, excess_delays and lift to per-route statistics.

    route_stats must already be support-gated (see route_delay_stats).
    Lift is NaN when the global rate is zero or undefined.
    """

    expected = route_stats['order_volume'] * global_delay_rate

    if pd.isna(global_delay_rate) or global_delay_rate == 0:
        lift = pd.Series(np.nan, index=route_stats.index, dtype='float64')
    else:
        lift = route_stats['delay_rate'] / global_delay_rate

    return route_stats.assign(
        expected_delays=expected,
        excess_delays=route_stats['delayed_orders'] - expected,
        lift=lift,
    )


def rank_by_excess_delays(benchmarked: pd.DataFrame,
                          top_n: int = TOP_N_EXCESS_ROUTES
                          ) -> pd.DataFrame:
    """
    Absolute operational impact: most delays above the benchmark first.
    """

    return benchmarked.sort_values(
        ['excess_delays', 'seller_state', 'customer_state'],
        ascending=[False, True, True],
        kind='mergesort'
    ).head(top_n).reset_index(drop=True)


def rank_by_lift(benchmarked: pd.DataFrame,
                 top_n: int = TOP_N_EXCESS_ROUTES
                 ) -> pd.DataFrame:
    """
    Relative risk: highest delay rate relative to the benchmark first.
    """

    return benchmarked.sort_values(
        ['lift', 'seller_state', 'customer_state'],
        ascending=[False, True, True],
        kind='mergesort',
        na_position='last'
    ).head(top_n).reset_index(drop=True)


# =============================================================================
# END OF SCRIPT
# =============================================================================
