# scripts/init_db.py
"""
Recreate the billing schema (customers, billboards, rate card, contracts,
contract boards, payments). Existing data is dropped.
"""

import logging

from billboard_billing.config import configure_logging
from billboard_billing.db.engine import get_engine
from billboard_billing.db.schema import metadata

logger = logging.getLogger(__name__)


def main():
    configure_logging()
    engine = get_engine()
    metadata.drop_all(engine)
    metadata.create_all(engine)
    logger.info(
        "Billing schema created at %s: %s",
        engine.url.render_as_string(hide_password=True),
        ", ".join(metadata.tables),
    )


if __name__ == "__main__":
    main()
