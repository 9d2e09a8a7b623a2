import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./test.db")
    DB_AUTO_CREATE_TABLES = bool(data.get("DB_AUTO_CREATE_TABLES", True))
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # GST authority API
    GST_API_URL = data.get("GST_API_URL", "https://your-gst-api.com/invoices")
    GST_API_KEY = data.get("GST_API_KEY", "")
    GST_API_TIMEOUT_SECONDS = float(data.get("GST_API_TIMEOUT_SECONDS", 10.0))
    GST_RATE = data.get("GST_RATE", "0.18")  # 18% GST

    # Invoice submission retry
    INVOICE_MAX_RETRIES = int(data.get("INVOICE_MAX_RETRIES", 3))
    INVOICE_BASE_RETRY_DELAY_MS = int(data.get("INVOICE_BASE_RETRY_DELAY_MS", 5000))
    INVOICE_DEADLINE_SECONDS = data.get("INVOICE_DEADLINE_SECONDS", None)  # None = no deadline
    ERROR_RECORD_MAX_ATTEMPTS = int(data.get("ERROR_RECORD_MAX_ATTEMPTS", 2))

    # Finished-booking re-drive sweep
    REDRIVE_ENABLED = bool(data.get("REDRIVE_ENABLED", True))
    REDRIVE_INTERVAL_SECONDS = data.get("REDRIVE_INTERVAL_SECONDS", 900)
    REDRIVE_BATCH_SIZE = data.get("REDRIVE_BATCH_SIZE", 100)
