import os

# Retrieve enviroment variables from .env file

DATABASE_USER = os.environ.get("DATABASE_USER")
DATABASE_PASS = os.environ.get("DATABASE_PASS")
DATABASE_HOST = os.environ.get("DATABASE_HOST")
DATABASE_NAME = os.environ.get("DATABASE_NAME")

if DATABASE_HOST:
    _default_url = "mysql+asyncmy://{0}:{1}@{2}/{3}".format(
        DATABASE_USER, DATABASE_PASS, DATABASE_HOST, DATABASE_NAME
    )
else:
    _default_url = "sqlite+aiosqlite:///./fhevote.db"

DATABASE_URL = os.environ.get("DATABASE_URL", _default_url)

SECRET_KEY: str = os.environ.get("SECRET_KEY")

# Fernet key used by the development confidentiality engine
ENCRYPTION_KEY = os.environ.get("ENCRYPTION_KEY")

LEDGER_CONTRACT_ADDRESS = os.environ.get(
    "LEDGER_CONTRACT_ADDRESS", "0x0000000000000000000000000000000000fe0001"
)

STATUS_SUCCESS_CLEAR_SECONDS = float(os.environ.get("STATUS_SUCCESS_CLEAR_SECONDS", 2))
STATUS_ERROR_CLEAR_SECONDS = float(os.environ.get("STATUS_ERROR_CLEAR_SECONDS", 3))

ACTIVE_WINDOW_SECONDS = int(os.environ.get("ACTIVE_WINDOW_SECONDS", 86400))

TIMEZONE = os.environ.get("TIMEZONE", "UTC")

ORIGINS: list = [
    "*"
]
