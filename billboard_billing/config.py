# billboard_billing/config.py

import logging
import os
from decimal import Decimal
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from billboard_billing.engine.types import CustomerCategory

load_dotenv()

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


class Settings(BaseModel):
    database_url: str = Field(default=os.getenv("DATABASE_URL", "sqlite:///db.sqlite"))

    # Pricing tier used when a new contract does not name one
    default_customer_category: CustomerCategory = Field(
        default=CustomerCategory(
            os.getenv("DEFAULT_CUSTOMER_CATEGORY", CustomerCategory.REGULAR.value)
        )
    )

    # Per-board price pre-filled on print/installation invoices
    default_print_price: Decimal = Field(
        default=Decimal(os.getenv("DEFAULT_PRINT_PRICE", "0"))
    )

    log_level: str = Field(default=os.getenv("LOG_LEVEL", "INFO"))

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


settings = Settings()


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(level=(level or settings.log_level).upper(), format=LOG_FORMAT)
