from conftest import add_invoice
from pos_api.services.invoice_numbers import InvoiceNumberService, parse_invoice_sequence


def test_parse_invoice_sequence():
    assert parse_invoice_sequence("RCT-501", "RCT-") == 501
    assert parse_invoice_sequence("RCT-", "RCT-") is None
    assert parse_invoice_sequence("RCT-12A", "RCT-") is None
    assert parse_invoice_sequence("INV-7", "RCT-") is None
    assert parse_invoice_sequence(None, "RCT-") is None


def test_empty_store_starts_at_one(db_session):
    service = InvoiceNumberService(db_session)

    assert service.max_invoice_id() == 0

    next_number = service.next_invoice_number()
    assert next_number.invoice_id == 1
    assert next_number.invoice_no == "RCT-1"


def test_next_number_uses_numeric_maximum(db_session):
    add_invoice(db_session, 7, "RCT-9", "10")
    add_invoice(db_session, 8, "RCT-10", "10")
    add_invoice(db_session, 9, "RCT-ABC", "10")
    add_invoice(db_session, 30, "INV-50", "10")

    service = InvoiceNumberService(db_session)

    assert service.max_invoice_id() == 30
    assert service.max_invoice_sequence() == 10

    next_number = service.next_invoice_number()
    assert next_number.invoice_id == 31
    assert next_number.invoice_no == "RCT-11"


def test_longer_non_numeric_numbers_do_not_hide_the_maximum(db_session):
    add_invoice(db_session, 1, "RCT-99", "10")
    add_invoice(db_session, 2, "RCT-100", "10")
    add_invoice(db_session, 3, "RCT-VOID-01", "10")
    add_invoice(db_session, 4, "RCT-999X", "10")

    assert InvoiceNumberService(db_session).max_invoice_sequence() == 100


def test_allocation_is_read_only(db_session):
    add_invoice(db_session, 500, "RCT-500", "10")
    service = InvoiceNumberService(db_session)

    first = service.next_invoice_number()
    second = service.next_invoice_number()

    assert first == second
    assert service.max_invoice_id() == 500
