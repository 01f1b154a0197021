# qrorder/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

# tables T1..T<TABLE_COUNT>
TABLE_COUNT = int(os.getenv("TABLE_COUNT", 10))

# table status windows, in seconds
AUTO_PRINT_BUFFER_SECONDS = int(os.getenv("AUTO_PRINT_BUFFER_SECONDS", 120))
PREPARATION_WINDOW_SECONDS = int(os.getenv("PREPARATION_WINDOW_SECONDS", 20 * 60))
PAY_CLEAR_SECONDS = int(os.getenv("PAY_CLEAR_SECONDS", 30))
NEW_ORDER_WINDOW_SECONDS = int(os.getenv("NEW_ORDER_WINDOW_SECONDS", 3 * 60))

# the business day ends at 03:00, not at midnight
BUSINESS_DAY_ROLLOVER_HOUR = int(os.getenv("BUSINESS_DAY_ROLLOVER_HOUR", 3))
TIMEZONE = os.getenv("TIMEZONE", "UTC")

TICKET_RETENTION_DAYS = int(os.getenv("TICKET_RETENTION_DAYS", 2))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 8000))
