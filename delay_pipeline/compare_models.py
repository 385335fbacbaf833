# =============================================================================
# MAE: ORIGIN VS DESTINATION VS ROUTE
# =============================================================================
# - Closed-form predictors: group-level delay rate for each order
# - Route predictor only covers routes with enough support
# - Lower MAE = granularity that better explains delay


from typing import Dict, List, Optional
import numpy as np
import pandas as pd

from delay_pipeline.aggregate_routes import ROUTE_KEYS, apply_min_support
from delay_pipeline.settings import MIN_ORDER_SUPPORT


MODEL_LABELS = {
    'origin': 'origin only',
    'destination': 'destination only',
    'route': 'route (origin+destination)',
}


def fit_group_rates(route_base: pd.DataFrame,
                    keys: List[str],
                    min_orders: Optional[int] = None
                    ) -> pd.DataFrame:
    """
    p_delay = mean(is_delayed) per group, optionally support-gated.
    """

    rates = (
        route_base.groupby(keys, sort=True)
        .agg(
            order_volume=('order_id', 'count'),
            p_delay=('is_delayed', 'mean'),
        )
        .reset_index()
    )

    return apply_min_support(rates, min_orders)[keys + ['p_delay']]


def mean_absolute_error(route_base: pd.DataFrame,
                        rates: pd.DataFrame,
                        keys: List[str]
                        ) -> Dict[str, object]:
    """
    mean |is_delayed - p_delay| over orders whose group has a prediction.
    """

    scored = route_base[keys + ['is_delayed']].merge(rates, on=keys, how='inner')
    abs_error = (scored['is_delayed'].astype('float64') - scored['p_delay']).abs()

    return {
        'mae': float(abs_error.mean()) if len(scored) else np.nan,
        'scored_orders': len(scored),
        'defined': len(scored) > 0,
    }


def compare_models(route_base: pd.DataFrame,
                   min_orders: Optional[int] = MIN_ORDER_SUPPORT
                   ) -> pd.DataFrame:
    """
    MAE of the three predictors, best (lowest) first.
    """

    predictors = {
        'origin': (['seller_state'], None),
        'destination': (['customer_state'], None),
        'route': (ROUTE_KEYS, min_orders),
    }

    records = []
    for name, (keys, support) in predictors.items():
        rates = fit_group_rates(route_base, keys, support)
        result = mean_absolute_error(route_base, rates, keys)
        records.append({'model': MODEL_LABELS[name], **result})

    comparison = pd.DataFrame(records, columns=['model', 'mae', 'scored_orders', 'defined'])

    return comparison.sort_values(
        ['mae', 'model'],
        kind='mergesort',
        na_position='last'
    ).reset_index(drop=True)


# =============================================================================
# END OF SCRIPT
# =============================================================================
