"""Unit tests for log entities and their resource descriptors."""

from __future__ import annotations

from datetime import datetime

import pytest

from packages.banklog_sdk import corporate_card_log, invoice_log, utility_payment_log
from packages.banklog_sdk.corporate_card_log import CorporateCardLog
from packages.banklog_sdk.errors import BankLogValidationError
from packages.banklog_sdk.invoice_log import InvoiceLog
from packages.banklog_sdk.resource import (
    Identifiable,
    api_endpoint,
    camel_to_kebab,
    last_name,
)
from packages.banklog_sdk.utility_payment_log import UtilityPaymentLog


def test_invoice_log_fields_read_back_and_created_is_parsed() -> None:
    """Constructed fields read back unchanged; ``created`` is a datetime."""
    invoice = {"id": "inv-1", "amount": 400000}
    log = InvoiceLog(
        id="5155165527080960",
        created="2020-03-10 10:30:00.000",
        type="registered",
        errors=[],
        invoice=invoice,
    )

    assert log.id == "5155165527080960"
    assert log.created == datetime(2020, 3, 10, 10, 30)
    assert log.type == "registered"
    assert log.errors == ()
    assert log.invoice == invoice


def test_log_entities_satisfy_identifiable() -> None:
    log = CorporateCardLog(id="1", created=datetime(2021, 1, 1), type="blocked")

    assert isinstance(log, Identifiable)


def test_log_entities_are_immutable() -> None:
    log = UtilityPaymentLog(id="1", created="2021-01-01", type="created")

    with pytest.raises(AttributeError):
        log.type = "paid"  # type: ignore[misc]


def test_log_errors_are_frozen_and_entities_hashable() -> None:
    """API error lists become tuples so observed logs cannot be mutated."""
    log = InvoiceLog.from_api_json(
        {
            "id": "1",
            "created": "2020-03-10",
            "type": "canceled",
            "errors": ["expired"],
            "invoice": {"id": "inv-1"},
        }
    )

    assert log.errors == ("expired",)
    with pytest.raises(AttributeError):
        log.errors.append("late")  # type: ignore[attr-defined]
    assert {log} == {log}


def test_malformed_created_raises_validation_error() -> None:
    with pytest.raises(BankLogValidationError):
        InvoiceLog(id="1", created="not-a-date", type="paid")


@pytest.mark.parametrize(
    ("factory", "parent_key"),
    [
        (InvoiceLog.from_api_json, "invoice"),
        (CorporateCardLog.from_api_json, "card"),
        (UtilityPaymentLog.from_api_json, "payment"),
    ],
)
def test_from_api_json_maps_parent_snapshot(factory, parent_key: str) -> None:
    """Each kind keeps its parent entity snapshot under its own field."""
    record = {
        "id": "42",
        "created": "2020-03-10T10:30:00.000000+00:00",
        "type": "created",
        parent_key: {"id": "parent-1"},
    }

    log = factory(record)

    assert log.id == "42"
    assert getattr(log, parent_key) == {"id": "parent-1"}
    assert log.created.year == 2020


def test_from_api_json_defaults_missing_errors_to_empty_tuple() -> None:
    log = UtilityPaymentLog.from_api_json(
        {"id": "1", "created": "2020-03-10", "type": "failed", "errors": None}
    )

    assert log.errors == ()


def test_from_api_json_requires_id_and_type() -> None:
    with pytest.raises(BankLogValidationError):
        InvoiceLog.from_api_json({"created": "2020-03-10", "type": "paid"})
    with pytest.raises(BankLogValidationError):
        InvoiceLog.from_api_json({"id": "1", "created": "2020-03-10"})


@pytest.mark.parametrize(
    ("name", "endpoint"),
    [
        ("InvoiceLog", "invoice/log"),
        ("CorporateCardLog", "corporate-card/log"),
        ("corporateCardLog", "corporate-card/log"),
        ("UtilityPaymentLog", "utility-payment/log"),
        ("Invoice", "invoice"),
    ],
)
def test_api_endpoint_nests_logs_under_parent(name: str, endpoint: str) -> None:
    assert api_endpoint(name) == endpoint


def test_camel_to_kebab_and_last_name() -> None:
    assert camel_to_kebab("CorporateCardLog") == "corporate-card-log"
    assert last_name("CorporateCardLog") == "log"


def test_resource_descriptors_declare_capabilities() -> None:
    """Only invoice logs expose pdfs; only card logs filter by ids."""
    assert invoice_log.RESOURCE.supports_pdf is True
    assert invoice_log.RESOURCE.supports_ids_filter is False
    assert invoice_log.RESOURCE.parent_filter == "invoiceIds"
    assert corporate_card_log.RESOURCE.supports_ids_filter is True
    assert corporate_card_log.RESOURCE.supports_pdf is False
    assert corporate_card_log.RESOURCE.parent_filter == "cardIds"
    assert utility_payment_log.RESOURCE.parent_filter == "paymentIds"
    assert utility_payment_log.RESOURCE.endpoint == "utility-payment/log"
    assert utility_payment_log.RESOURCE.singular_key == "log"
    assert utility_payment_log.RESOURCE.plural_key == "logs"
