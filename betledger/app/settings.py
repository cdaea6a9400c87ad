# betledger/app/settings.py
import os
from pathlib import Path
from dotenv import load_dotenv

# Always load the repo-root .env, regardless of CWD
ROOT_ENV = Path(__file__).resolve().parents[2] / ".env"
load_dotenv(dotenv_path=ROOT_ENV)


def _csv(val: str) -> list:
    return [s.strip() for s in val.split(",") if s.strip()]


class Settings:
    # ----------------------------------------------------------------------
    # Runtime
    # ----------------------------------------------------------------------
    ENV = os.getenv("ENV", "local")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # ----------------------------------------------------------------------
    # Database (DATABASE_URL wins; PG* parts are the local fallback)
    # ----------------------------------------------------------------------
    DATABASE_URL = os.getenv("DATABASE_URL")
    PGHOST = os.getenv("PGHOST", "localhost")
    PGPORT = int(os.getenv("PGPORT", "5432"))
    PGUSER = os.getenv("PGUSER", "ledger_user")
    PGPASSWORD = os.getenv("PGPASSWORD", "ledger_pass")
    PGDATABASE = os.getenv("PGDATABASE", "ledger_db")

    # ----------------------------------------------------------------------
    # Analytics
    # ----------------------------------------------------------------------
    # used when a user never configured a starting bankroll
    DEFAULT_INITIAL_BANKROLL = float(os.getenv("DEFAULT_INITIAL_BANKROLL", "0"))
    TOP_N_GROUPS = int(os.getenv("TOP_N_GROUPS", "10"))

    # ----------------------------------------------------------------------
    # HTTP
    # ----------------------------------------------------------------------
    CORS_ORIGINS = _csv(os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"))


settings = Settings()
