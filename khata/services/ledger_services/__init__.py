from khata.services.ledger_services.order_valuation import (
    build_price_map, calculate_order_total, unknown_product_ids, product_label, UNKNOWN_PRODUCT
)
from khata.services.ledger_services.collection_aggregation import (
    sum_collections_for_order, sum_collections_for_customer, collections_by_order, collections_by_customer
)
from khata.services.ledger_services.balance_resolver import (
    outstanding, resolve_order_balance, resolve_order_balances, order_bucket,
    aggregate_customer_pending, quotation_total,
    BUCKET_PENDING, BUCKET_UDHAAR, BUCKET_HISTORY,
)
