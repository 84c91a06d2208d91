"""Runtime configuration read from the environment (.env supported)."""
import os
from dataclasses import dataclass, field
from typing import List, Optional
from dotenv import load_dotenv


@dataclass
class Settings:
    mongodb_uri: Optional[str]
    db_name: str = "expenseTracker"
    collection_name: str = "expenses"
    currency_symbol: str = "₹"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv() # Searches current dir and parents
        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            mongodb_uri=os.getenv("MONGODB_URI"),
            db_name=os.getenv("DB_NAME", "expenseTracker"),
            collection_name=os.getenv("EXPENSES_COLLECTION", "expenses"),
            currency_symbol=os.getenv("CURRENCY_SYMBOL", "₹"),
            cors_origins=[origin.strip() for origin in origins.split(",") if origin.strip()],
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
