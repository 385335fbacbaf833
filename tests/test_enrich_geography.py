import pandas as pd

from delay_pipeline.enrich_geography import (
    DEFAULT_REGION,
    REGION_BY_STATE,
    build_customer_dimension,
    build_route_base,
    map_region,
    resolve_primary_seller_state,
)


def test_region_lookup():
    assert map_region('SP') == 'Southeast'
    assert map_region('AM') == 'North'
    assert map_region('BA') == 'Northeast'
    assert map_region('DF') == 'Center-West'
    assert map_region('RS') == 'South'
    assert map_region('XX') == DEFAULT_REGION
    assert map_region(None) == DEFAULT_REGION
    assert len(REGION_BY_STATE) == 27
    assert set(REGION_BY_STATE.values()) == {'North', 'Northeast', 'Center-West', 'Southeast', 'South'}


def test_customer_dimension_assigns_other():
    customers = pd.DataFrame({'customer_id': ['c1', 'c2'], 'customer_state': ['MG', 'ZZ']})

    dimension = build_customer_dimension(customers)

    assert dimension['customer_region'].tolist() == ['Southeast', 'Other']


def test_primary_seller_state_is_minimum():
    items = pd.DataFrame({
        'order_id': ['o1', 'o1', 'o1', 'o2', 'o3'],
        'order_item_id': [1, 2, 3, 1, 1],
        'seller_id': ['s_sp', 's_mg', 's_unknown', 's_sp', 's_unknown'],
    })
    sellers = pd.DataFrame({'seller_id': ['s_sp', 's_mg'], 'seller_state': ['SP', 'MG']})

    primary = resolve_primary_seller_state(items, sellers)

    assert primary['order_id'].tolist() == ['o1', 'o2']
    assert primary['seller_state'].tolist() == ['MG', 'SP']


def test_primary_seller_state_ignores_item_order():
    sellers = pd.DataFrame({'seller_id': ['a', 'b'], 'seller_state': ['RJ', 'PR']})
    forward = pd.DataFrame({'order_id': ['o1', 'o1'], 'order_item_id': [1, 2], 'seller_id': ['a', 'b']})
    backward = pd.DataFrame({'order_id': ['o1', 'o1'], 'order_item_id': [1, 2], 'seller_id': ['b', 'a']})

    assert resolve_primary_seller_state(forward, sellers)['seller_state'].tolist() == ['PR']
    assert resolve_primary_seller_state(backward, sellers)['seller_state'].tolist() == ['PR']


def test_route_base_requires_both_endpoints():
    delivered = pd.DataFrame({
        'order_id': ['o1', 'o2', 'o3', 'o4'],
        'customer_id': ['c1', 'c2', 'c3', 'c4'],
        'transport_days': [30, 31, 10, 40],
    })
    customers = pd.DataFrame({
        'customer_id': ['c1', 'c2', 'c3', 'c4'],
        'customer_state': ['SP', 'RJ', None, 'AM'],
    })
    items = pd.DataFrame({
        'order_id': ['o1', 'o2', 'o3'],
        'order_item_id': [1, 1, 1],
        'seller_id': ['s1', 's1', 's1'],
    })
    sellers = pd.DataFrame({'seller_id': ['s1'], 'seller_state': ['SP']})

    route_base = build_route_base(delivered, customers, items, sellers)

    assert route_base['order_id'].tolist() == ['o1', 'o2']
    assert route_base['is_delayed'].tolist() == [False, True]
    assert route_base['route_type'].tolist() == ['Same state', 'Different state']
    assert route_base['customer_region'].tolist() == ['Southeast', 'Southeast']
