# =============================================================================
# OLIST LOGISTICS DELAY ANALYSIS
# =============================================================================
# - Grain: 1 row per delivered order
# - Validation -> lead time -> outliers -> geography -> routes -> benchmark -> MAE
# - Every output is recomputed from the four raw tables on each run


import os
import sys
from typing import Dict, List, Optional
import pandas as pd

from delay_pipeline.aggregate_routes import (
    customer_state_delay_stats,
    region_delay_stats,
    relative_risk,
    route_delay_stats,
    route_type_delay_stats,
    top_routes_by_delayed_orders,
)
from delay_pipeline.compare_models import compare_models
from delay_pipeline.derive_lead_times import (
    build_delivered_base,
    item_count_impact,
    summarize_lead_time,
    summarize_stages,
    transport_by_customer_state,
)
from delay_pipeline.detect_outliers import summarize_outliers
from delay_pipeline.enrich_geography import build_route_base
from delay_pipeline.rank_benchmark import (
    benchmark_routes,
    compute_global_delay_rate,
    rank_by_excess_delays,
    rank_by_lift,
)
from delay_pipeline.settings import (
    DELAY_THRESHOLD_DAYS,
    IQR_MULTIPLIER,
    MIN_ORDER_SUPPORT,
    RAW_DATA_BASE_PATH,
    TABLE_CONFIG,
    TOP_N_EXCESS_ROUTES,
    TOP_N_ROUTES,
)
from delay_pipeline.validate_raw_data import (
    init_report,
    log_error,
    log_info,
    validate_tables,
)


# ------------------------------------------------------------
# PIPELINE
# ------------------------------------------------------------

def run_pipeline(tables: Dict[str, pd.DataFrame],
                 report: Optional[Dict[str, List[str]]] = None,
                 delay_threshold_days: int = DELAY_THRESHOLD_DAYS,
                 min_orders: int = MIN_ORDER_SUPPORT,
                 iqr_multiplier: float = IQR_MULTIPLIER,
                 top_n_routes: int = TOP_N_ROUTES,
                 top_n_excess_routes: int = TOP_N_EXCESS_ROUTES
                 ) -> Dict[str, object]:
    """
    Run every stage over the orders, order_items, customers and sellers tables.

    Returns one named result per analysis; undefined ratios come back as NaN
    with their *_defined flag set to False.
    """

    if report is None:
        report = init_report()

    orders = tables['orders']
    order_items = tables['order_items']
    customers = tables['customers']
    sellers = tables['sellers']

    validation = validate_tables(tables, report)

    delivered = build_delivered_base(orders)
    log_info(f'Delivered base: {len(delivered)} order(s)', report)

    route_base = build_route_base(
        delivered, customers, order_items, sellers, delay_threshold_days
    )
    log_info(f'Route base: {len(route_base)} order(s) with both endpoints resolved', report)

    route_types = route_type_delay_stats(route_base)
    route_stats = route_delay_stats(route_base, min_orders)

    global_benchmark = compute_global_delay_rate(route_base)
    benchmarked = benchmark_routes(route_stats, global_benchmark['global_delay_rate'])

    return {
        'validation': validation,
        'delivered_base': delivered,
        'route_base': route_base,
        'lead_time_summary': summarize_lead_time(delivered),
        'stage_summary': summarize_stages(delivered),
        'item_count_impact': item_count_impact(delivered, order_items),
        'transport_by_customer_state': transport_by_customer_state(delivered, customers),
        'outlier_summary': summarize_outliers(delivered, iqr_multiplier),
        'customer_state_delays': customer_state_delay_stats(route_base, min_orders),
        'region_delays': region_delay_stats(route_base),
        'route_type_delays': route_types,
        'relative_risk': relative_risk(route_types),
        'top_routes_by_delayed_orders': top_routes_by_delayed_orders(route_base, top_n_routes),
        'route_delays': benchmarked,
        'global_benchmark': global_benchmark,
        'top_routes_by_excess': rank_by_excess_delays(benchmarked, top_n_excess_routes),
        'top_routes_by_lift': rank_by_lift(benchmarked, top_n_excess_routes),
        'model_comparison': compare_models(route_base, min_orders),
        'report': report,
    }


# ------------------------------------------------------------
# INPUT-OUTPUT HELPERS
# ------------------------------------------------------------

def load_csv_file(csv_path: str, table_name: str,
                  report: Dict[str, List[str]]
                  ) -> Optional[pd.DataFrame]:
    try:
        df = pd.read_csv(csv_path)
        log_info(f'Loaded {table_name} file: {os.path.basename(csv_path)} ({len(df)} rows)', report)

        return df

    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        log_error(f'Failed to load {table_name} file {csv_path}: {e}', report)

        return None


def load_tables(base_path: str,
                report: Dict[str, List[str]]
                ) -> Dict[str, pd.DataFrame]:
    """
    Load the four Olist extracts declared in TABLE_CONFIG.
    Missing or unreadable files are logged as errors and left out.
    """

    tables: Dict[str, pd.DataFrame] = {}

    for table_name, config in TABLE_CONFIG.items():
        csv_path = os.path.join(base_path, config['file_name'])

        if not os.path.exists(csv_path):
            log_error(f'Missing file: {csv_path}', report)

            continue

        df = load_csv_file(csv_path, table_name, report)
        if df is not None:
            tables[table_name] = df

    return tables


def format_record(record: Dict[str, object]) -> str:
    return '\n'.join(f'  {key}: {value}' for key, value in record.items())


def print_results(results: Dict[str, object]) -> None:
    sections = [
        'lead_time_summary',
        'stage_summary',
        'outlier_summary',
        'item_count_impact',
        'transport_by_customer_state',
        'customer_state_delays',
        'region_delays',
        'route_type_delays',
        'relative_risk',
        'top_routes_by_delayed_orders',
        'global_benchmark',
        'top_routes_by_excess',
        'top_routes_by_lift',
        'model_comparison',
    ]

    for name in sections:
        value = results[name]
        print('\n' + '=' * 70)
        print(name.replace('_', ' ').upper())
        print('=' * 70)

        if isinstance(value, pd.DataFrame):
            print(value.to_string(index=False))
        else:
            print(format_record(value))


# ------------------------------------------------------------
# MAIN EXECUTION
# ------------------------------------------------------------

def main() -> None:
    report = init_report()

    tables = load_tables(RAW_DATA_BASE_PATH, report)

    if report['errors']:
        sys.exit(1)

    results = run_pipeline(tables, report)
    print_results(results)

    log_info(
        f'Analysis complete with {len(report["warnings"])} data integrity warning(s)',
        report
        )

    sys.exit(0)


if __name__ == '__main__':
    main()


# =============================================================================
# END OF SCRIPT
# =============================================================================
