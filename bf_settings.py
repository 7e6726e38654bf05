import os

from dotenv import load_dotenv

# Values may come from a .env file in the working directory
load_dotenv()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_STEP_LIMIT = int(os.environ.get("BF_STEP_LIMIT", "5000"))
LOG_LEVEL = os.environ.get("BF_LOG_LEVEL", "WARNING").upper()
if LOG_LEVEL not in LOG_LEVELS:
    LOG_LEVEL = "WARNING"
