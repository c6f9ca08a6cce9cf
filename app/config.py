import os
from dotenv import load_dotenv

# Load .env (VS Code terminals sometimes don't inject env vars)
load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./benefits.db")
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///./benefits_test.db")

REDEMPTION_VALIDITY_DAYS = int(os.getenv("REDEMPTION_VALIDITY_DAYS", "30"))
REDEMPTION_CODE_PREFIX = os.getenv("REDEMPTION_CODE_PREFIX", "ACB")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
