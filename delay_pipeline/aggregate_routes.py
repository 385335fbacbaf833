# =============================================================================
# ROUTE & GEOGRAPHIC DELAY AGGREGATES
# =============================================================================
# - Delay rates per route (seller state -> customer state), customer state, region
# - Minimum-support gate shared by every threshold-gated table
# - Interstate vs intrastate partition and its relative risk


from typing import Dict, List, Optional
import numpy as np
import pandas as pd

from delay_pipeline.enrich_geography import DIFFERENT_STATE, SAME_STATE
from delay_pipeline.settings import MIN_ORDER_SUPPORT, TOP_N_ROUTES


ROUTE_KEYS = ['seller_state', 'customer_state']


# ------------------------------------------------------------
# SHARED HELPERS
# ------------------------------------------------------------

def apply_min_support(df: pd.DataFrame,
                      min_orders: Optional[int] = MIN_ORDER_SUPPORT,
                      volume_column: str = 'order_volume'
                      ) -> pd.DataFrame:
    """
    Keep groups with at least `min_orders` orders; None disables the gate.
    """

    if min_orders is None:
        return df

    return df.loc[df[volume_column] >= min_orders].reset_index(drop=True)


def summarize_delay_by(route_base: pd.DataFrame, keys: List[str]) -> pd.DataFrame:
    """
    order_volume, delayed_orders, delay_rate and avg_transport_days per group.
    """

    summary = (
        route_base.groupby(keys, sort=True)
        .agg(
            order_volume=('order_id', 'count'),
            delayed_orders=('is_delayed', 'sum'),
            avg_transport_days=('transport_days', 'mean'),
        )
        .reset_index()
    )

    summary = summary.astype({'order_volume': 'int64', 'delayed_orders': 'int64'})

    return summary.assign(
        delay_rate=summary['delayed_orders'] / summary['order_volume']
    )


def sort_by_delay_rate(summary: pd.DataFrame, keys: List[str]) -> pd.DataFrame:
    return summary.sort_values(
        ['delay_rate'] + keys,
        ascending=[False] + [True] * len(keys),
        kind='mergesort'
    ).reset_index(drop=True)


# ------------------------------------------------------------
# GROUPED DELAY RATES
# ------------------------------------------------------------

def route_delay_stats(route_base: pd.DataFrame,
                      min_orders: Optional[int] = MIN_ORDER_SUPPORT
                      ) -> pd.DataFrame:
    """
    Per-route delay statistics for routes with enough support.
    """

    routes = apply_min_support(summarize_delay_by(route_base, ROUTE_KEYS), min_orders)

    return sort_by_delay_rate(routes, ROUTE_KEYS)


def customer_state_delay_stats(route_base: pd.DataFrame,
                               min_orders: Optional[int] = MIN_ORDER_SUPPORT
                               ) -> pd.DataFrame:
    states = apply_min_support(summarize_delay_by(route_base, ['customer_state']), min_orders)

    return sort_by_delay_rate(states, ['customer_state'])


def region_delay_stats(route_base: pd.DataFrame) -> pd.DataFrame:
    """
    Per-region delay rates; regions are few enough to skip the support gate.
    """

    regions = summarize_delay_by(route_base, ['customer_region'])

    return sort_by_delay_rate(regions, ['customer_region'])


def top_routes_by_delayed_orders(route_base: pd.DataFrame,
                                 top_n: int = TOP_N_ROUTES
                                 ) -> pd.DataFrame:
    """
    Routes with the most delayed orders in absolute terms (no support gate).
    """

    routes = summarize_delay_by(route_base, ROUTE_KEYS)

    return routes.sort_values(
        ['delayed_orders'] + ROUTE_KEYS,
        ascending=[False, True, True],
        kind='mergesort'
    ).head(top_n).reset_index(drop=True)


# ------------------------------------------------------------
# INTERSTATE VS INTRASTATE
# ------------------------------------------------------------

def route_type_delay_stats(route_base: pd.DataFrame) -> pd.DataFrame:
    route_types = summarize_delay_by(route_base, ['route_type'])

    return sort_by_delay_rate(route_types, ['route_type'])


def relative_risk(route_types: pd.DataFrame) -> Dict[str, object]:
    """
    delay_rate(different state) / delay_rate(same state).

    Undefined (NaN, relative_risk_defined=False) when either group is empty
    or the same-state group has no delayed orders. Zero interstate delays
    against a non-zero intrastate rate give a defined 0.0.
    """

    by_type = route_types.set_index('route_type')

    def group_value(route_type: str, column: str):
        if route_type in by_type.index:
            return by_type.at[route_type, column]

        return np.nan

    same_rate = group_value(SAME_STATE, 'delay_rate')
    different_rate = group_value(DIFFERENT_STATE, 'delay_rate')
    same_delayed = group_value(SAME_STATE, 'delayed_orders')

    defined = (
        not pd.isna(same_rate)
        and not pd.isna(different_rate)
        and same_delayed > 0
    )

    return {
        'same_state_delay_rate': same_rate,
        'different_state_delay_rate': different_rate,
        'same_state_delayed_orders': same_delayed,
        'different_state_delayed_orders': group_value(DIFFERENT_STATE, 'delayed_orders'),
        'relative_risk': float(different_rate / same_rate) if defined else np.nan,
        'relative_risk_defined': bool(defined),
    }


# =============================================================================
# END OF SCRIPT
# =============================================================================
