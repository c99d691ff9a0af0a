DATA_DIR = "data"
DB_FILE_NAME = "pharmacy_pos.db"

KV_TABLE = "kv_store"

MONEY_PLACES = 2

# purchase order list: paid/unpaid badge cache
PAYMENT_STATUS_CACHE_KEY = "purchaseOrderPaymentStatuses"
PAYMENT_STATUS_CACHE_TTL_MS = 30 * 60 * 1000

BATCH_PAYMENT_STATUS_PATH = "/api/accounting2/transactions/purchase-orders/batch-payment-status"
