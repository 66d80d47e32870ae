# scripts/ingest.py

import csv
import logging
import os
from datetime import datetime

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from invoicedesk.config import configure_logging
from invoicedesk.db.engine import get_engine
from invoicedesk.db.schema import INVOICE_STATUSES, customers, invoices, revenue

logger = logging.getLogger(__name__)

DATA_DIR = "data"


# ---- Helpers ----

def parse_cents(value: str) -> int:
    value = (value or "").strip()
    if value == "":
        raise ValueError("amount is empty")
    cents = int(value)
    if cents <= 0:
        raise ValueError(f"amount must be positive, got {cents}")
    return cents


def parse_invoice_date(value: str):
    value = (value or "").strip()
    if not value:
        raise ValueError("date is empty")
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_status(value: str) -> str:
    value = (value or "").strip().lower()
    if value not in INVOICE_STATUSES:
        raise ValueError(f"unknown status {value!r}")
    return value


def _optional(value):
    value = (value or "").strip()
    return value or None


def _read_rows(file_path: str, parse_row, stats: dict) -> list:
    records = []
    with open(file_path, newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            stats["n_rows"] += 1
            try:
                records.append(parse_row(row))
            except (KeyError, ValueError) as e:
                stats["n_errors"] += 1
                if len(stats["error_examples"]) < 5:
                    stats["error_examples"].append(
                        {
                            "file": os.path.basename(file_path),
                            "row_number": stats["n_rows"],
                            "row": dict(row),
                            "error": repr(e),
                        }
                    )
    return records


def _customer_row(row: dict) -> dict:
    name = row["name"].strip()
    if not name:
        raise ValueError("name is empty")
    return {
        "id": row["id"].strip(),
        "name": name,
        "email": row["email"].strip(),
        "image_url": _optional(row.get("image_url")),
    }


def _invoice_row(row: dict) -> dict:
    return {
        "id": row["id"].strip(),
        "customer_id": row["customer_id"].strip(),
        "amount": parse_cents(row["amount"]),
        "status": parse_status(row["status"]),
        "date": parse_invoice_date(row["date"]),
    }


def _revenue_row(row: dict) -> dict:
    return {
        "month": row["month"].strip(),
        "revenue": int(row["revenue"].strip()),
    }


def parse_seed_data(data_dir: str = DATA_DIR):
    stats = {"n_rows": 0, "n_errors": 0, "error_examples": []}

    customers_list = _read_rows(os.path.join(data_dir, "customers.csv"), _customer_row, stats)
    invoices_list = _read_rows(os.path.join(data_dir, "invoices.csv"), _invoice_row, stats)
    revenue_list = _read_rows(os.path.join(data_dir, "revenue.csv"), _revenue_row, stats)

    # invoices pointing at customers we did not load would fail the foreign key
    known_customers = {c["id"] for c in customers_list}
    orphans = [inv for inv in invoices_list if inv["customer_id"] not in known_customers]
    invoices_list = [inv for inv in invoices_list if inv["customer_id"] in known_customers]

    stats.update(
        {
            "n_customers": len(customers_list),
            "n_invoices": len(invoices_list),
            "n_revenue": len(revenue_list),
            "n_orphan_invoices": len(orphans),
        }
    )
    return customers_list, invoices_list, revenue_list, stats


def _insert_for(conn):
    if conn.dialect.name == "postgresql":
        return pg_insert
    return sqlite_insert


def upsert_invoice(conn, invoice_row: dict) -> None:
    """
    Insert or update an invoice by id, so re-running the ingest is idempotent.
    """
    stmt = _insert_for(conn)(invoices).values(**invoice_row)

    # On conflict by id, update the mutable fields
    update_cols = {
        "customer_id": stmt.excluded.customer_id,
        "amount": stmt.excluded.amount,
        "status": stmt.excluded.status,
        "date": stmt.excluded.date,
    }

    stmt = stmt.on_conflict_do_update(
        index_elements=[invoices.c.id],
        set_=update_cols,
    )

    conn.execute(stmt)


def load_into_db(customers_list, invoices_list, revenue_list, engine=None):
    engine = engine or get_engine()
    with engine.begin() as conn:
        # Rebuild revenue from scratch (deterministic)
        conn.execute(revenue.delete())

        for customer in customers_list:
            stmt = _insert_for(conn)(customers).values(**customer)
            conn.execute(
                stmt.on_conflict_do_update(
                    index_elements=[customers.c.id],
                    set_={
                        "name": stmt.excluded.name,
                        "email": stmt.excluded.email,
                        "image_url": stmt.excluded.image_url,
                    },
                )
            )

        if revenue_list:
            conn.execute(revenue.insert(), revenue_list)

        # Idempotent invoices: upsert by id
        for inv in invoices_list:
            upsert_invoice(conn, inv)


def main():
    configure_logging()
    customers_list, invoices_list, revenue_list, stats = parse_seed_data(DATA_DIR)
    load_into_db(customers_list, invoices_list, revenue_list)

    logger.info("Total CSV rows read:   %s", stats["n_rows"])
    logger.info("Customers loaded:      %s", stats["n_customers"])
    logger.info("Invoices loaded:       %s", stats["n_invoices"])
    logger.info("Revenue months loaded: %s", stats["n_revenue"])
    logger.info("Rows with errors:      %s", stats["n_errors"])

    if stats["n_orphan_invoices"]:
        logger.warning(
            "Skipped %s invoice(s) referencing unknown customers",
            stats["n_orphan_invoices"],
        )

    if stats["error_examples"]:
        logger.warning("Example errors:")
        for ex in stats["error_examples"]:
            logger.warning("%s row %s: %s", ex["file"], ex["row_number"], ex["error"])


if __name__ == "__main__":
    main()
