# =============================================================================
# DERIVE DELIVERED-ORDER LEAD TIMES
# =============================================================================
# - Build the delivered base: 1 row per delivered order with complete timestamps
# - Decompose lead time into approval, dispatch and transport stages
# - Summarize distribution and stage variability to locate the bottleneck


from typing import Dict
import numpy as np
import pandas as pd

from delay_pipeline.settings import DELIVERED_STATUS, ORDER_TIMESTAMPS
from delay_pipeline.validate_raw_data import exclude_ambiguous_keys


STAGES = ['approval_days', 'dispatch_days', 'transport_days']


# ------------------------------------------------------------
# DAY ARITHMETIC
# ------------------------------------------------------------

def day_difference(start: pd.Series, end: pd.Series) -> pd.Series:
    """
    Whole calendar days between two timestamp columns.

    Both sides are truncated to midnight first, so consecutive differences
    add up exactly to the end-to-end difference.
    """

    return (end.dt.normalize() - start.dt.normalize()).dt.days.astype('int64')


# ------------------------------------------------------------
# DELIVERED BASE
# ------------------------------------------------------------

def build_delivered_base(orders: pd.DataFrame) -> pd.DataFrame:
    """
    One row per delivered order with lead time and stage durations.

    Negative lead times (delivery before purchase) are kept as-is.
    """

    orders = exclude_ambiguous_keys(orders, ['order_id'])

    timestamps = {
        col: pd.to_datetime(orders[col], errors='coerce')
        for col in ORDER_TIMESTAMPS
    }

    complete = pd.concat(timestamps, axis=1).notna().all(axis=1)
    delivered = (orders['order_status'] == DELIVERED_STATUS) & complete

    base = orders.loc[delivered, ['order_id', 'customer_id']].assign(
        **{col: ts[delivered] for col, ts in timestamps.items()}
    )

    purchase = base['order_purchase_timestamp']
    approved = base['order_approved_at']
    carrier = base['order_delivered_carrier_date']
    customer = base['order_delivered_customer_date']

    base = base.assign(
        lead_time_days=day_difference(purchase, customer),
        approval_days=day_difference(purchase, approved),
        dispatch_days=day_difference(approved, carrier),
        transport_days=day_difference(carrier, customer),
    )

    return base.sort_values('order_id', kind='mergesort').reset_index(drop=True)


# ------------------------------------------------------------
# DISTRIBUTION SUMMARY
# ------------------------------------------------------------

def summarize_lead_time(delivered: pd.DataFrame) -> Dict[str, float]:
    """
    Grain check plus min/max/mean/median/std of lead_time_days.
    """

    lead_time = delivered['lead_time_days']

    return {
        'rows': len(delivered),
        'unique_orders': int(delivered['order_id'].nunique()),
        'min_lead_time_days': lead_time.min() if len(lead_time) else np.nan,
        'max_lead_time_days': lead_time.max() if len(lead_time) else np.nan,
        'mean_days': lead_time.mean(),
        'median_days': lead_time.median(),
        'stddev_days': lead_time.std(),
    }


def stage_share(stage_mean: float, lead_time_mean: float) -> float:
    if pd.isna(lead_time_mean) or lead_time_mean == 0:
        return np.nan

    return 100.0 * stage_mean / lead_time_mean


def summarize_stages(delivered: pd.DataFrame) -> Dict[str, object]:
    """
    Stage variability and each stage's share of the average lead time.

    Shares are undefined (NaN, flagged) when the average lead time is zero.
    """

    avg_lead_time = delivered['lead_time_days'].mean()
    summary = {'avg_total_lead_time': avg_lead_time}

    for stage in STAGES:
        name = stage.replace('_days', '')
        avg = delivered[stage].mean()
        share = stage_share(avg, avg_lead_time)

        summary[f'avg_{stage}'] = avg
        summary[f'std_{stage}'] = delivered[stage].std()
        summary[f'{name}_share_pct'] = share
        summary[f'{name}_share_defined'] = not pd.isna(share)

    return summary


# ------------------------------------------------------------
# SUPPLEMENTARY BREAKDOWNS
# ------------------------------------------------------------

def items_per_order(order_items: pd.DataFrame) -> pd.DataFrame:
    """
    1 row per order with its item count (avoids row explosion on joins).
    """

    items = exclude_ambiguous_keys(order_items, ['order_id', 'order_item_id'])

    return (
        items.groupby('order_id', sort=True)
        .size()
        .rename('item_count')
        .reset_index()
    )


def item_count_impact(delivered: pd.DataFrame,
                      order_items: pd.DataFrame
                      ) -> pd.DataFrame:
    """
    Order volume and average transport days per item count.

    Orders without items form their own group with a missing item_count.
    """

    merged = delivered[['order_id', 'transport_days']].merge(
        items_per_order(order_items), on='order_id', how='left'
    )

    return (
        merged.groupby('item_count', dropna=False, sort=True)
        .agg(
            order_volume=('order_id', 'count'),
            avg_transport_days=('transport_days', 'mean'),
        )
        .reset_index()
    )


def transport_by_customer_state(delivered: pd.DataFrame,
                                customers: pd.DataFrame
                                ) -> pd.DataFrame:
    """
    Average transport days per customer state, slowest first.
    """

    customers = exclude_ambiguous_keys(customers, ['customer_id'])

    merged = delivered[['order_id', 'customer_id', 'transport_days']].merge(
        customers[['customer_id', 'customer_state']], on='customer_id', how='left'
    )

    summary = (
        merged.groupby('customer_state', dropna=False)
        .agg(
            order_volume=('order_id', 'count'),
            avg_transport_days=('transport_days', 'mean'),
        )
        .reset_index()
    )

    return summary.sort_values(
        ['avg_transport_days', 'customer_state'],
        ascending=[False, True],
        kind='mergesort'
    ).reset_index(drop=True)


# =============================================================================
# END OF SCRIPT
# =============================================================================
