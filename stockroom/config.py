"""Inventory store configuration."""

import os

DB_PATH = os.getenv("DB_PATH", "/data/inventory.db")
SERVICE_NAME = os.getenv("SERVICE_NAME", "inventory-service")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Upper bound on an encoded item record, in bytes. Fixed: records already on
# disk were written under this bound.
MAX_RECORD_SIZE = 1024
