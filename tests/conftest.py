"""Root conftest - shared test configuration."""

import os

# Ensure tests never use real notification credentials or payment config
os.environ.setdefault("TELEGRAM_BOT_TOKEN", "")
os.environ.setdefault("TELEGRAM_CHAT_ID", "")
os.environ.setdefault("LOG_FORMAT", "text")
