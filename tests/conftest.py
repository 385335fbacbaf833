from typing import List, Tuple

import pandas as pd
import pytest

from delay_pipeline.enrich_geography import DIFFERENT_STATE, SAME_STATE, map_region


PURCHASE = pd.Timestamp('2018-01-01 10:00:00')
APPROVED = pd.Timestamp('2018-01-01 12:00:00')
CARRIER = pd.Timestamp('2018-01-03 09:00:00')


def build_route_base(routes: List[Tuple[str, str, int, int]]) -> pd.DataFrame:
    """
    routes: (seller_state, customer_state, order_volume, delayed_orders)
    """

    rows = []
    for seller_state, customer_state, volume, delayed in routes:
        for i in range(volume):
            is_delayed = i < delayed
            rows.append({
                'order_id': f'{seller_state}-{customer_state}-{i:04d}',
                'seller_state': seller_state,
                'customer_state': customer_state,
                'customer_region': map_region(customer_state),
                'transport_days': 35 if is_delayed else 5,
                'is_delayed': is_delayed,
                'route_type': SAME_STATE if seller_state == customer_state else DIFFERENT_STATE,
            })

    return pd.DataFrame(rows)


def build_raw_tables(routes: List[Tuple[str, str, int, int]]):
    """
    Raw orders / order_items / customers / sellers producing the given routes.

    Delayed orders spend 35 days in transport, the others 5.
    """

    orders, items, customers = [], [], []
    seller_states = sorted({seller_state for seller_state, _, _, _ in routes})
    sellers = pd.DataFrame({
        'seller_id': [f'seller-{state}' for state in seller_states],
        'seller_state': seller_states,
    })

    for seller_state, customer_state, volume, delayed in routes:
        for i in range(volume):
            order_id = f'{seller_state}-{customer_state}-{i:04d}'
            customer_id = f'cust-{order_id}'
            transport = 35 if i < delayed else 5

            orders.append({
                'order_id': order_id,
                'customer_id': customer_id,
                'order_status': 'delivered',
                'order_purchase_timestamp': PURCHASE,
                'order_approved_at': APPROVED,
                'order_delivered_carrier_date': CARRIER,
                'order_delivered_customer_date': CARRIER + pd.Timedelta(days=transport),
            })
            items.append({
                'order_id': order_id,
                'order_item_id': 1,
                'seller_id': f'seller-{seller_state}',
            })
            customers.append({
                'customer_id': customer_id,
                'customer_state': customer_state,
            })

    return {
        'orders': pd.DataFrame(orders),
        'order_items': pd.DataFrame(items),
        'customers': pd.DataFrame(customers),
        'sellers': sellers,
    }


@pytest.fixture
def route_base_factory():
    return build_route_base


@pytest.fixture
def raw_tables_factory():
    return build_raw_tables


@pytest.fixture
def orders_df():
    return pd.DataFrame({
        'order_id': ['o1', 'o2', 'o3', 'o4', 'o5'],
        'customer_id': ['c1', 'c2', 'c3', 'c4', 'c5'],
        'order_status': ['delivered', 'delivered', 'canceled', 'delivered', 'delivered'],
        'order_purchase_timestamp': [
            '2018-01-01 23:30:00',
            '2018-01-05 08:00:00',
            '2018-01-05 08:00:00',
            '2018-01-10 10:00:00',
            '2018-02-10 10:00:00',
        ],
        'order_approved_at': [
            '2018-01-02 00:10:00',
            '2018-01-05 09:00:00',
            '2018-01-05 09:00:00',
            '2018-01-10 11:00:00',
            '2018-02-10 11:00:00',
        ],
        'order_delivered_carrier_date': [
            '2018-01-03 18:00:00',
            '2018-01-07 10:00:00',
            None,
            None,
            '2018-02-12 10:00:00',
        ],
        'order_delivered_customer_date': [
            '2018-01-12 01:00:00',
            '2018-01-20 17:00:00',
            None,
            '2018-01-15 10:00:00',
            '2018-02-08 10:00:00',
        ],
    })
