# barberbook/config.py

import os
import warnings
from pathlib import Path

from dotenv import load_dotenv

# .env at the project root, then the working directory
load_dotenv(dotenv_path=Path(__file__).resolve().parent.parent / ".env")
load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./barber.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    warnings.warn("SECRET_KEY not set, using an insecure development key", RuntimeWarning, stacklevel=2)
    SECRET_KEY = "change-me-later"
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

DAY_OFF_FALLBACK_REASON = os.getenv("DAY_OFF_FALLBACK_REASON", "Barber is not available on this day")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
