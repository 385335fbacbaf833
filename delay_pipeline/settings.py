# =============================================================================
# DELAY ANALYSIS SETTINGS
# =============================================================================
# - Shared thresholds and input declarations for every pipeline stage
# - Environment variables override defaults for ad-hoc reruns


import os


# ------------------------------------------------------------
# CONFIGURATIONS
# ------------------------------------------------------------

RAW_DATA_BASE_PATH = os.getenv('RAW_DATA_BASE_PATH', 'data/raw')

# transport_days strictly above this counts as a delayed order
DELAY_THRESHOLD_DAYS = int(os.getenv('DELAY_THRESHOLD_DAYS', '30'))

# Minimum orders before a route / state gets its own delay rate
MIN_ORDER_SUPPORT = int(os.getenv('MIN_ORDER_SUPPORT', '100'))

IQR_MULTIPLIER = float(os.getenv('IQR_MULTIPLIER', '1.5'))

TOP_N_ROUTES = int(os.getenv('TOP_N_ROUTES', '10'))
TOP_N_EXCESS_ROUTES = int(os.getenv('TOP_N_EXCESS_ROUTES', '5'))

DELIVERED_STATUS = 'delivered'

ORDER_TIMESTAMPS = [
    'order_purchase_timestamp',
    'order_approved_at',
    'order_delivered_carrier_date',
    'order_delivered_customer_date',
]

TABLE_CONFIG = {
    'orders': {
        'role': 'event_fact',
        'primary_key': ['order_id'],
        'file_name': 'olist_orders_dataset.csv',
    },
    'order_items': {
        'role': 'transaction_detail',
        'primary_key': ['order_id', 'order_item_id'],
        'file_name': 'olist_order_items_dataset.csv',
    },
    'customers': {
        'role': 'entity_reference',
        'primary_key': ['customer_id'],
        'file_name': 'olist_customers_dataset.csv',
    },
    'sellers': {
        'role': 'entity_reference',
        'primary_key': ['seller_id'],
        'file_name': 'olist_sellers_dataset.csv',
    },
}


# =============================================================================
# END OF SCRIPT
# =============================================================================
