from datetime import date

import pytest
from sqlalchemy import func, select

from invoicedesk.db.schema import customers, invoices, revenue
from scripts.ingest import load_into_db, parse_cents, parse_seed_data, parse_status


@pytest.fixture
def data_dir(tmp_path):
    (tmp_path / "customers.csv").write_text(
        "id,name,email,image_url\n"
        "c1,Acme Co,billing@acme.com,\n"
        "c2,Lee Robinson,lee@robinson.com,/customers/lee-robinson.png\n"
        "c3,,nobody@nowhere.com,\n"
    )
    (tmp_path / "invoices.csv").write_text(
        "id,customer_id,amount,status,date\n"
        "i1,c1,15795,pending,2022-12-06\n"
        "i2,c2,4999,PAID,2023-06-09\n"
        "i3,c2,abc,paid,2023-06-10\n"
        "i4,c2,100,overdue,2023-06-11\n"
        "i5,c9,100,paid,2023-06-12\n"
    )
    (tmp_path / "revenue.csv").write_text("month,revenue\nJan,2000\nFeb,1800\n")
    return tmp_path


def test_parse_helpers():
    assert parse_cents(" 4999 ") == 4999
    assert parse_status(" Paid ") == "paid"
    with pytest.raises(ValueError):
        parse_cents("0")
    with pytest.raises(ValueError):
        parse_status("overdue")


def test_parse_seed_data_counts_errors(data_dir):
    customers_list, invoices_list, revenue_list, stats = parse_seed_data(str(data_dir))

    assert [c["id"] for c in customers_list] == ["c1", "c2"]
    assert customers_list[0]["image_url"] is None
    assert [i["id"] for i in invoices_list] == ["i1", "i2"]
    assert invoices_list[1]["status"] == "paid"
    assert invoices_list[0]["date"] == date(2022, 12, 6)
    assert len(revenue_list) == 2

    assert stats["n_rows"] == 10
    assert stats["n_errors"] == 3
    assert stats["n_orphan_invoices"] == 1
    assert len(stats["error_examples"]) == 3


def test_load_is_idempotent(engine, data_dir):
    customers_list, invoices_list, revenue_list, _ = parse_seed_data(str(data_dir))

    load_into_db(customers_list, invoices_list, revenue_list, engine=engine)
    load_into_db(customers_list, invoices_list, revenue_list, engine=engine)

    with engine.connect() as conn:
        assert conn.execute(select(func.count()).select_from(customers)).scalar_one() == 2
        assert conn.execute(select(func.count()).select_from(invoices)).scalar_one() == 2
        assert conn.execute(select(func.count()).select_from(revenue)).scalar_one() == 2
        amount = conn.execute(
            select(invoices.c.amount).where(invoices.c.id == "i1")
        ).scalar_one()
    assert amount == 15795
