# =============================================================================
# VALIDATE RAW LOGISTICS DATA
# =============================================================================
# - Check grain and key uniqueness of orders, order items, customers, sellers
# - Count missing timestamps that shrink the delivered-order base
# - Report problems as warnings with counts; nothing here stops the pipeline


from typing import Dict, List, Optional
import pandas as pd

from delay_pipeline.settings import DELIVERED_STATUS, TABLE_CONFIG


ORDER_TIMESTAMP_COUNTS = {
    'order_purchase_timestamp': 'missing_purchase_ts',
    'order_approved_at': 'missing_approved_ts',
    'order_delivered_carrier_date': 'missing_carrier_ts',
    'order_delivered_customer_date': 'missing_delivery_ts',
}


# ------------------------------------------------------------
# VALIDATION REPORT & LOGS
# ------------------------------------------------------------

def init_report() -> Dict[str, List[str]]:

    return {
        'errors': [],
        'warnings': [],
        'info': []
    }


def log_info(message: str, report: Dict[str, List[str]]) -> None:
    print(f'[INFO] {message}')
    report['info'].append(message)


def log_warning(message: str, report: Dict[str, List[str]]) -> None:
    print(f'[WARNING] {message}')
    report['warnings'].append(message)


def log_error(message: str, report: Dict[str, List[str]]) -> None:
    print(f'[ERROR] {message}')
    report['errors'].append(message)


# ------------------------------------------------------------
# KEY HELPERS
# ------------------------------------------------------------

def count_duplicate_keys(df: pd.DataFrame, key: List[str]) -> int:
    """
    Number of rows beyond the first for every repeated key value.
    """

    if df.empty:
        return 0

    return int(df.duplicated(subset=key).sum())


def exclude_ambiguous_keys(df: pd.DataFrame, key: List[str]) -> pd.DataFrame:
    """
    Drop every row whose key is null or shared with another row.
    No copy of a repeated key survives.
    """

    null_key = df[key].isnull().any(axis=1)
    repeated_key = df.duplicated(subset=key, keep=False)

    return df.loc[~null_key & ~repeated_key].reset_index(drop=True)


# ------------------------------------------------------------
# BASE VALIDATIONS (ALL TABLES)
# ------------------------------------------------------------

def run_base_validations(df: pd.DataFrame,
                         table_name: str,
                         primary_key: List[str],
                         report: Dict[str, List[str]]
                         ) -> bool:
    """
    Base structural validations.

    Warns on broken grain; affected rows are excluded downstream.
    Returns False when the primary key columns are absent.
    """

    missing_pk_columns = [col for col in primary_key if col not in df.columns]

    if df.empty:
        log_warning(f'{table_name}: dataset is empty', report)

        return not missing_pk_columns

    duplicate_columns = df.columns[df.columns.duplicated()].tolist()
    if duplicate_columns:
        log_warning(
            f'{table_name}: duplicate column names detected: {duplicate_columns}',
            report
            )

    if missing_pk_columns:
        log_warning(
            f'{table_name}: missing primary key column(s): {missing_pk_columns}',
            report
            )

        return False

    pk_null_count = int(df[primary_key].isnull().any(axis=1).sum())
    if pk_null_count > 0:
        log_warning(
            f'{table_name}: {pk_null_count} row(s) with null primary key values',
            report
            )

    duplicate_pk_count = count_duplicate_keys(df, primary_key)
    if duplicate_pk_count > 0:
        log_warning(
            f'{table_name}: {duplicate_pk_count} duplicated primary key value(s)',
            report
            )

    return True


# ------------------------------------------------------------
# EVENT FACT VALIDATIONS
# ------------------------------------------------------------

def has_columns(df: pd.DataFrame,
                table_name: str,
                columns: List[str],
                check: str,
                report: Dict[str, List[str]]
                ) -> bool:
    """
    Warn and skip a check whose input columns are absent.
    """

    missing = [col for col in columns if col not in df.columns]
    if missing:
        log_warning(f'{table_name}: {check} skipped, missing column(s): {missing}', report)

        return False

    return True


def run_event_fact_validations(df: pd.DataFrame,
                               table_name: str,
                               report: Dict[str, List[str]]
                               ) -> Dict[str, Optional[int]]:
    """
    Timestamp completeness for the orders table.

    Returns the missing-value counts per timestamp column; an absent
    column counts every row as missing.
    """

    parsed = {}
    counts = {}

    for col, name in ORDER_TIMESTAMP_COUNTS.items():
        if has_columns(df, table_name, [col], f'{name.replace("_", " ")} count', report):
            parsed[col] = pd.to_datetime(df[col], errors='coerce')
            counts[name] = int(parsed[col].isna().sum())
        else:
            counts[name] = len(df)

    for name, count in counts.items():
        if count > 0:
            log_warning(
                f'{table_name}: {count} row(s) with {name.replace("_", " ")}',
                report
                )

    required = ['order_status', 'order_purchase_timestamp', 'order_delivered_customer_date']
    if not has_columns(df, table_name, required, 'delivery order check', report):
        counts['delivery_before_purchase'] = None

        return counts

    purchase_ts = parsed['order_purchase_timestamp']
    delivered_ts = parsed['order_delivered_customer_date']

    # Kept in data; surfaced again through the lead time min/max
    delivered = df['order_status'] == DELIVERED_STATUS
    invalid_delivery = int((delivered & (delivered_ts < purchase_ts)).sum())
    if invalid_delivery > 0:
        log_warning(
            f'{table_name}: {invalid_delivery} delivered order(s) where delivery precedes purchase',
            report
            )

    counts['delivery_before_purchase'] = invalid_delivery

    return counts


# ------------------------------------------------------------
# CROSS-TABLE VALIDATIONS
# ------------------------------------------------------------

def run_cross_table_validations(tables: Dict[str, pd.DataFrame],
                                report: Dict[str, List[str]]
                                ) -> Dict[str, Optional[int]]:
    """
    Cross-table validations.

    Orphan items and unknown sellers only narrow route coverage.
    Counts whose join columns are absent come back as None.
    """

    orders_df = tables['orders']
    order_items_df = tables['order_items']
    sellers_df = tables['sellers']

    counts = {
        'orphan_order_items': None,
        'unknown_seller_items': None,
        'orders_without_items': None,
    }

    order_links = (
        has_columns(orders_df, 'orders', ['order_id'], 'order item linkage', report)
        and has_columns(order_items_df, 'order_items', ['order_id'], 'order item linkage', report)
    )

    if order_links:
        order_id_set = set(orders_df['order_id'].dropna().unique())

        orphan_items = int((~order_items_df['order_id'].isin(order_id_set)).sum())
        if orphan_items > 0:
            log_warning(
                f'order_items: {orphan_items} orphan record(s) referencing non-existent order_id',
                report
                )

        orders_without_items = int(
            (~orders_df['order_id'].isin(set(order_items_df['order_id']))).sum()
            )
        if orders_without_items > 0:
            log_info(f'orders: {orders_without_items} order(s) without items', report)

        counts['orphan_order_items'] = orphan_items
        counts['orders_without_items'] = orders_without_items

    seller_links = (
        has_columns(order_items_df, 'order_items', ['seller_id'], 'seller linkage', report)
        and has_columns(sellers_df, 'sellers', ['seller_id'], 'seller linkage', report)
    )

    if seller_links:
        seller_id_set = set(sellers_df['seller_id'].dropna().unique())

        unknown_sellers = int((~order_items_df['seller_id'].isin(seller_id_set)).sum())
        if unknown_sellers > 0:
            log_warning(
                f'order_items: {unknown_sellers} record(s) referencing unknown seller_id',
                report
                )

        counts['unknown_seller_items'] = unknown_sellers

    return counts


# ------------------------------------------------------------
# MAIN VALIDATION
# ------------------------------------------------------------

def validate_tables(tables: Dict[str, pd.DataFrame],
                    report: Optional[Dict[str, List[str]]] = None
                    ) -> Dict[str, object]:
    """
    Run every check and return the grain and completeness counts.

    Never raises on bad data: problems land in report['warnings'] and
    grain counts that need an absent key column are None.
    """

    if report is None:
        report = init_report()

    usable_keys = {
        table_name: run_base_validations(
            tables[table_name], table_name, config['primary_key'], report
            )
        for table_name, config in TABLE_CONFIG.items()
    }

    orders = tables['orders']
    order_items = tables['order_items']

    timestamp_counts = run_event_fact_validations(orders, 'orders', report)
    cross_counts = run_cross_table_validations(tables, report)

    order_key = TABLE_CONFIG['orders']['primary_key']
    item_key = TABLE_CONFIG['order_items']['primary_key']

    if usable_keys['orders']:
        unique_orders = int(orders['order_id'].nunique())
        duplicate_order_ids = count_duplicate_keys(orders, order_key)
    else:
        unique_orders = duplicate_order_ids = None

    if usable_keys['order_items']:
        unique_order_items = len(order_items.drop_duplicates(subset=item_key))
        duplicate_order_items = count_duplicate_keys(order_items, item_key)
    else:
        unique_order_items = duplicate_order_items = None

    if 'order_id' in order_items.columns:
        orders_with_items = int(order_items['order_id'].nunique())
    else:
        orders_with_items = None

    summary = {
        'total_orders': len(orders),
        'unique_orders': unique_orders,
        'duplicate_order_ids': duplicate_order_ids,
        'total_order_items': len(order_items),
        'unique_order_items': unique_order_items,
        'duplicate_order_items': duplicate_order_items,
        'orders_with_items': orders_with_items,
        'has_purchase_ts': len(orders) - timestamp_counts['missing_purchase_ts'],
        'has_delivery_ts': len(orders) - timestamp_counts['missing_delivery_ts'],
        **timestamp_counts,
        **cross_counts,
        'report': report,
    }

    log_info(
        f'Validated {summary["total_orders"]} orders and '
        f'{summary["total_order_items"]} order items '
        f'({len(report["warnings"])} warning(s))',
        report
        )

    return summary


# =============================================================================
# END OF SCRIPT
# =============================================================================
