# ims_reporting/constants.py
APP_NAME = "IMS Reports"

# ---- API defaults (overridable via environment, see config.py) ----
DEFAULT_API_URL = "http://localhost:5000/api/expenses/api"
DEFAULT_API_TIMEOUT = 30.0  # seconds
DEFAULT_PAGE_SIZE = 100
DEFAULT_CURRENCY_SYMBOL = "Rwf"

# ---- Endpoints ----
EP_SALES = "/sales"
EP_PACKAGING_REPORT = "/sales/packaging-report"
EP_EXPENSES = "/expenses"
EP_INTERNAL_USE = "/internal-use"
EP_INTERNAL_USE_TOTAL = "/internal-use/total-value"
EP_STOCK_ADJUSTMENTS = "/stock-adjustments"
EP_STOCK_ADJUSTMENTS_TOTAL = "/stock-adjustments/total-impact"

# ---- Enumerations used by the backend ----
PAYMENT_UNPAID = "Unpaid"
PAYMENT_PARTIAL = "Partial"
PAYMENT_PAID = "Paid"
PAYMENT_REFUNDED = "Refunded"
PAYMENT_STATUSES: tuple[str, ...] = (PAYMENT_UNPAID, PAYMENT_PARTIAL, PAYMENT_PAID, PAYMENT_REFUNDED)

PAYMENT_METHODS: tuple[str, ...] = ("Cash", "Credit Card", "Mobile Money", "Bank Transfer")

SALE_COMPLETED = "Completed"
SALE_RETURNED = "Returned"
SALE_PARTIALLY_RETURNED = "Partially Returned"
SALE_STATUSES: tuple[str, ...] = (SALE_COMPLETED, SALE_RETURNED, SALE_PARTIALLY_RETURNED)

PACKAGING_NONE = "None"
PACKAGING_REUSABLE = "Reusable"
PACKAGING_TYPES: tuple[str, ...] = (PACKAGING_NONE, PACKAGING_REUSABLE, "Recyclable", "Compostable", "Other")
# Non-deposit packaging tabulated by quantity in the circular economy report
OTHER_PACKAGING_TYPES: tuple[str, ...] = ("Recyclable", "Compostable", "Other")

ADJUSTMENT_TYPES: tuple[str, ...] = ("damaged", "expired", "lost", "shrinkage", "other")

UNCATEGORIZED = "Uncategorized"
