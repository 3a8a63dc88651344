import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Internal storage configuration
STORAGE_DIR = os.getenv("DROPBOX_TASKS_STORAGE_DIR", os.path.join(os.getcwd(), "storage"))
WORKING_DIR = os.getenv("DROPBOX_TASKS_WORKING_DIR")

# Dropbox configuration
DROPBOX_USER_AGENT = os.getenv("DROPBOX_USER_AGENT", "dropbox-tasks")
DROPBOX_TIMEOUT = float(os.getenv("DROPBOX_TIMEOUT", "100"))

# Logging configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def configure_logging():
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def get_secret(name):
    """Read a secret from the environment, failing when it is not set"""
    value = os.getenv(name)
    if value is None:
        raise KeyError(f"Secret '{name}' is not defined in the environment")
    return value
