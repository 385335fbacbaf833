# =============================================================================
# GEOGRAPHIC ENRICHMENT
# =============================================================================
# - Map customer state to macro-region through a fixed lookup
# - Resolve one primary seller state per order (min over the order's sellers)
# - Build the route base: 1 row per delivered order with both endpoints known


from typing import Optional
import pandas as pd

from delay_pipeline.settings import DELAY_THRESHOLD_DAYS
from delay_pipeline.validate_raw_data import exclude_ambiguous_keys


# ------------------------------------------------------------
# REGION MAPPING
# ------------------------------------------------------------

REGION_STATES = {
    'North': ['AM', 'PA', 'RO', 'RR', 'AC', 'AP', 'TO'],
    'Northeast': ['AL', 'BA', 'CE', 'MA', 'PB', 'PE', 'PI', 'RN', 'SE'],
    'Center-West': ['DF', 'GO', 'MT', 'MS'],
    'Southeast': ['ES', 'MG', 'RJ', 'SP'],
    'South': ['PR', 'RS', 'SC'],
}

REGION_BY_STATE = {
    state: region
    for region, states in REGION_STATES.items()
    for state in states
}

DEFAULT_REGION = 'Other'

SAME_STATE = 'Same state'
DIFFERENT_STATE = 'Different state'


def map_region(state: Optional[str]) -> str:
    return REGION_BY_STATE.get(state, DEFAULT_REGION)


def build_customer_dimension(customers: pd.DataFrame) -> pd.DataFrame:
    """
    customer_id, customer_state, customer_region (unambiguous ids only).
    """

    customers = exclude_ambiguous_keys(customers, ['customer_id'])
    dimension = customers[['customer_id', 'customer_state']]

    return dimension.assign(
        customer_region=dimension['customer_state'].map(map_region)
    )


# ------------------------------------------------------------
# PRIMARY SELLER STATE
# ------------------------------------------------------------

def resolve_primary_seller_state(order_items: pd.DataFrame,
                                 sellers: pd.DataFrame
                                 ) -> pd.DataFrame:
    """
    One row per order: the lexically smallest seller_state among its items.

    Items whose seller cannot be resolved are ignored; orders left with no
    seller state at all do not appear.
    """

    items = exclude_ambiguous_keys(order_items, ['order_id', 'order_item_id'])
    sellers = exclude_ambiguous_keys(sellers, ['seller_id'])

    items_with_state = items[['order_id', 'seller_id']].merge(
        sellers[['seller_id', 'seller_state']], on='seller_id', how='inner'
    ).dropna(subset=['seller_state'])

    return (
        items_with_state.groupby('order_id', sort=True)['seller_state']
        .min()
        .reset_index()
    )


# ------------------------------------------------------------
# ROUTE BASE
# ------------------------------------------------------------

def build_route_base(delivered: pd.DataFrame,
                     customers: pd.DataFrame,
                     order_items: pd.DataFrame,
                     sellers: pd.DataFrame,
                     delay_threshold_days: int = DELAY_THRESHOLD_DAYS
                     ) -> pd.DataFrame:
    """
    Route record per delivered order with seller and customer state resolved.

    is_delayed = transport_days > delay_threshold_days.
    """

    primary_seller = resolve_primary_seller_state(order_items, sellers)
    customer_dim = build_customer_dimension(customers)

    route_base = (
        delivered[['order_id', 'customer_id', 'transport_days']]
        .merge(customer_dim, on='customer_id', how='inner')
        .merge(primary_seller, on='order_id', how='inner')
        .dropna(subset=['customer_state', 'seller_state'])
    )

    same_state = route_base['seller_state'] == route_base['customer_state']

    route_base = route_base.assign(
        is_delayed=route_base['transport_days'] > delay_threshold_days,
        route_type=same_state.map({True: SAME_STATE, False: DIFFERENT_STATE}),
    )

    columns = [
        'order_id',
        'seller_state',
        'customer_state',
        'customer_region',
        'transport_days',
        'is_delayed',
        'route_type',
    ]

    return route_base[columns].sort_values('order_id', kind='mergesort').reset_index(drop=True)


# =============================================================================
# END OF SCRIPT
# =============================================================================
