# billboard_billing/db/engine.py

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from billboard_billing.config import settings


def get_engine(url: Optional[str] = None) -> Engine:
    # echo=True if you want to see SQL printed in the terminal
    return create_engine(url or settings.database_url, future=True)
