APP_NAME = "Ledger"
DB_FILE = "ledger.db"
DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"

MINOR_UNITS = 100          # cents per major unit
DEFAULT_CURRENCY = "USD"

# Pattern detectors
RECURRING_LOOKBACK_MONTHS = 3
RECURRING_MIN_OCCURRENCES = 2
RECURRING_FREQUENCY_LABEL = "Monthly?"
ANOMALY_LOOKBACK_MONTHS = 1
ANOMALY_THRESHOLD = 20000  # minor units ($200.00)
ANOMALY_LARGE_TRANSACTION = "Large Transaction"

# Forecast
FORECAST_TRAILING_MONTHS = 3
FORECAST_LABEL_FORMAT = "%b %y"

RECENT_TRANSACTION_LIMIT = 50

DEFAULT_SETTINGS = [
    ("default_currency", DEFAULT_CURRENCY),
    ("currency_symbol", "$"),
]

DEFAULT_ACCOUNTS = [
    {"name": "Cash",             "type": "Cash"},
    {"name": "Checking",         "type": "Bank"},
    {"name": "Credit Card",      "type": "Card"},
    {"name": "Opening Balances", "type": "Equity"},
    {"name": "Income",           "type": "Income"},
    {"name": "Expenses",         "type": "Expense"},
]

DEFAULT_CATEGORIES = [
    {"name": "Salary",         "icon": "💼", "color": "#4CAF50"},
    {"name": "Food & Dining",  "icon": "🍽", "color": "#FF9800"},
    {"name": "Rent/Mortgage",  "icon": "🏠", "color": "#F44336"},
    {"name": "Utilities",      "icon": "💡", "color": "#9C27B0"},
    {"name": "Transport",      "icon": "🚗", "color": "#2196F3"},
    {"name": "Healthcare",     "icon": "⚕",  "color": "#00BCD4"},
    {"name": "Entertainment",  "icon": "🎬", "color": "#FF5722"},
    {"name": "Subscriptions",  "icon": "🔁", "color": "#3F51B5"},
    {"name": "Other",          "icon": "•",  "color": "#888888"},
]

CHART_INCOME_COLOR = "#4CAF50"
CHART_EXPENSE_COLOR = "#F44336"
CHART_LINE_COLOR = "#2196F3"
