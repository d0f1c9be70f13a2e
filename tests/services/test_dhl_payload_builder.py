"""Tests for the DHL XML-PI payload builder."""

import dataclasses
import logging
import re
from datetime import date

import pytest

from src.services.dhl_payload_builder import (
    build_shipment_payload,
    country_name,
)
from src.services.dhl_request_normalizer import normalize_request
from src.services.measurement import LengthUnit, Mass, MassUnit
from src.services.parcel import Parcel
from src.services.payload_tree import prune_absent
from src.services.shipment_models import ExportDeclaration

MESSAGE_REFERENCE = "0123456789abcdef0123456789abcdef"


@pytest.fixture
def build(credentials, country_names, fixed_now):
    """Build the payload tree for a request with the shared fixtures."""
    def _build(request, message_reference=MESSAGE_REFERENCE):
        return build_shipment_payload(
            normalize_request(request),
            credentials=credentials,
            country_names=country_names,
            now=fixed_now,
            message_reference=message_reference,
        )
    return _build


def _value(tree, path):
    node = tree.get(path)
    return None if node is None or node.is_null else node.value


class TestSectionOrder:
    """Test the fixed top-level section order."""

    def test_all_sections_present_in_order(self, build, metric_request):
        tree = build(metric_request)
        assert list(tree.fields) == [
            "Request",
            "LanguageCode",
            "Billing",
            "Consignee",
            "Dutiable",
            "ExportDeclaration",
            "Reference",
            "ShipmentDetails",
            "Shipper",
            "SpecialService",
            "LabelImageFormat",
            "Label",
        ]

    def test_shipment_details_order(self, build, metric_request):
        details = build(metric_request).get("ShipmentDetails")
        assert list(details.fields) == [
            "Pieces",
            "WeightUnit",
            "GlobalProductCode",
            "Date",
            "Contents",
            "DimensionUnit",
            "IsDutiable",
            "CurrencyCode",
        ]


class TestServiceHeader:
    """Test request header fields."""

    def test_header_values(self, build, metric_request):
        tree = build(metric_request)
        assert _value(tree, "Request.ServiceHeader.MessageTime") == "2024-03-05T09:30:00+00:00"
        assert _value(tree, "Request.ServiceHeader.MessageReference") == MESSAGE_REFERENCE
        assert _value(tree, "Request.ServiceHeader.SiteID") == "TestSite"
        assert _value(tree, "Request.ServiceHeader.Password") == "s3cr3t-pass"
        assert _value(tree, "Request.MetaData.SoftwareName") == "3PV"
        assert _value(tree, "LanguageCode") == "en"

    def test_generated_message_reference(self, build, metric_request):
        tree = build(metric_request, message_reference=None)
        reference = _value(tree, "Request.ServiceHeader.MessageReference")
        assert re.fullmatch(r"[0-9a-f]{32}", reference)

    def test_dates_default_to_clock(self, build, metric_request):
        tree = build(metric_request)
        assert _value(tree, "ShipmentDetails.Date") == "2024-03-05"
        assert _value(tree, "ExportDeclaration.InvoiceDate") == "2024-03-05"

    def test_explicit_date(self, build, metric_request):
        request = dataclasses.replace(metric_request, date=date(2024, 12, 24))
        assert _value(build(request), "ShipmentDetails.Date") == "2024-12-24"


class TestAddresses:
    """Test Consignee and Shipper blocks."""

    def test_consignee(self, build, metric_request):
        tree = build(metric_request)
        assert _value(tree, "Consignee.CompanyName") == "Beispiel GmbH"
        assert _value(tree, "Consignee.AddressLine1") == "Unter den Linden 5"
        assert tree.get("Consignee.AddressLine2").is_null
        assert _value(tree, "Consignee.City") == "Berlin"
        assert _value(tree, "Consignee.PostalCode") == "10117"
        assert _value(tree, "Consignee.CountryCode") == "DE"
        assert _value(tree, "Consignee.CountryName") == "Germany"
        assert _value(tree, "Consignee.Contact.PersonName") == "Alex Empfänger"

    def test_empty_address_line_pruned_city_kept(self, build, metric_request):
        pruned = prune_absent(build(metric_request))
        assert pruned.get("Consignee.AddressLine2") is None
        assert pruned.get("Consignee.City").value == "Berlin"

    def test_shipper_starts_with_shipper_id(self, build, metric_request):
        shipper = build(metric_request).get("Shipper")
        assert list(shipper.fields)[0] == "ShipperID"
        assert shipper.fields["ShipperID"].value == "123456789"
        assert shipper.fields["CountryName"].value == "United States Of America"

    def test_unknown_country_logs_and_omits_name(self, build, metric_request, caplog):
        request = dataclasses.replace(
            metric_request,
            recipient=dataclasses.replace(metric_request.recipient, country_code="ZZ"),
        )
        with caplog.at_level(logging.WARNING, logger="src.services.dhl_payload_builder"):
            tree = build(request)
        assert tree.get("Consignee.CountryName").is_null
        assert "ZZ" in caplog.text


class TestCountryName:
    """Test country name lookup and truncation."""

    def test_truncated_to_35_characters(self, country_names):
        name = country_name("VE", country_names)
        assert len(name) == 35
        assert name == country_names["VE"][:35]

    def test_truncation_counts_code_points(self):
        name = country_name("XX", {"XX": "é" * 40})
        assert name == "é" * 35


class TestPieces:
    """Test Piece records."""

    def test_piece_ids_and_formatting(self, build, metric_request):
        parcels = [
            Parcel.make(10, 20, 30, 2.5, length_unit=LengthUnit.CENTIMETER),
            Parcel.make(15.4, 15.5, 1, 1.005, length_unit=LengthUnit.CENTIMETER),
            Parcel.make(1, 1, 1, 0.1),
        ]
        tree = build(dataclasses.replace(metric_request, parcels=parcels))
        pieces = tree.get("ShipmentDetails.Pieces.Piece").to_value()
        assert [p["PieceID"] for p in pieces] == ["1", "2", "3"]
        assert pieces[0] == {
            "PieceID": "1",
            "PackageType": "YP",
            "Weight": "2.50",
            "Width": "10",
            "Height": "20",
            "Depth": "30",
        }
        assert pieces[1]["Width"] == "15"
        assert pieces[1]["Height"] == "16"
        assert pieces[1]["Weight"] == "1.01"
        assert pieces[2]["Width"] == "100"

    def test_imperial_units(self, build, metric_request):
        request = dataclasses.replace(
            metric_request,
            units="imperial",
            parcels=[Parcel.make(10, 10, 10, 1, length_unit=LengthUnit.INCH, mass_unit=MassUnit.POUND)],
        )
        tree = build(request)
        assert _value(tree, "ShipmentDetails.WeightUnit") == "L"
        assert _value(tree, "ShipmentDetails.DimensionUnit") == "I"
        assert tree.get("ShipmentDetails.Pieces.Piece.0.Weight").value == "1.00"


class TestNonDutiable:
    """Test a metric, non-dutiable, single-parcel shipment."""

    def test_no_customs_values_or_services(self, build, metric_request):
        tree = build(metric_request)
        assert tree.get("Dutiable.DeclaredValue").is_null
        assert tree.get("Dutiable.DeclaredCurrency").is_null
        assert tree.get("Dutiable.TermsOfTrade").is_null
        assert "DutyAccountNumber" not in tree.get("Billing").fields
        assert _value(tree, "ShipmentDetails.IsDutiable") == "N"
        assert _value(tree, "ShipmentDetails.WeightUnit") == "K"
        assert _value(tree, "ShipmentDetails.DimensionUnit") == "C"

        pruned = prune_absent(tree)
        assert pruned.get("Dutiable") is None
        assert pruned.get("SpecialService") is None

    def test_billing(self, build, metric_request):
        billing = build(metric_request).get("Billing").to_value()
        assert billing == {
            "ShipperAccountNumber": "123456789",
            "ShippingPaymentType": "S",
            "BillingAccountNumber": "123456789",
        }


class TestDutiable:
    """Test dutiable shipments and duty billing."""

    def test_sender_pays_duty(self, build, metric_request):
        request = dataclasses.replace(
            metric_request, is_dutiable=True, incoterm="DDP", value=120.0, currency="EUR"
        )
        tree = build(request)
        assert _value(tree, "Billing.DutyAccountNumber") == "123456789"
        assert _value(tree, "Dutiable.DeclaredValue") == "120.00"
        assert _value(tree, "Dutiable.DeclaredCurrency") == "EUR"
        assert _value(tree, "Dutiable.TermsOfTrade") == "DDP"
        assert _value(tree, "ShipmentDetails.IsDutiable") == "Y"

    def test_recipient_pays_duty(self, build, metric_request):
        request = dataclasses.replace(metric_request, is_dutiable=True, incoterm="DAP")
        tree = build(request)
        assert tree.get("Billing.DutyAccountNumber").is_null
        assert prune_absent(tree).get("Billing.DutyAccountNumber") is None

    def test_itn_filing(self, build, metric_request):
        request = dataclasses.replace(
            metric_request, international_transaction_no="X20240305123456"
        )
        assert build(request).get("Dutiable.Filing").to_value() == {
            "FilingType": "ITN",
            "ITN": "X20240305123456",
        }

    def test_no_filing_without_itn(self, build, metric_request):
        assert "Filing" not in build(metric_request).get("Dutiable").fields


class TestExportLineItems:
    """Test export declaration lines."""

    def test_line_items(self, build, metric_request):
        request = dataclasses.replace(
            metric_request,
            export_declarations=[
                ExportDeclaration("Mugs", 4, 10.0, Mass(1, MassUnit.POUND), "CN"),
                ExportDeclaration("Plates", 1, 7.5, Mass(2, MassUnit.KILOGRAM), "DE"),
            ],
        )
        tree = build(request)
        items = tree.get("ExportDeclaration.ExportLineItem").to_value()
        assert items[0] == {
            "LineNumber": "1",
            "Quantity": "4",
            "QuantityUnit": "PCS",
            "Description": "Mugs",
            "Value": "2.50",
            "Weight": {"Weight": "0.45", "WeightUnit": "K"},
            "GrossWeight": {"Weight": "0.45", "WeightUnit": "K"},
            "ManufactureCountryCode": "CN",
        }
        assert items[1]["LineNumber"] == "2"
        assert items[1]["Value"] == "7.50"
        assert _value(tree, "ExportDeclaration.InvoiceNumber") == "ORDER-1001"


class TestSpecialServices:
    """Test SpecialService entries and insurance."""

    def test_signature_then_insurance(self, build, metric_request):
        request = dataclasses.replace(
            metric_request, signature_required=True, insured_value=100.0
        )
        services = build(request).get("SpecialService").to_value()
        assert services == [
            {"SpecialServiceType": "SA"},
            {"SpecialServiceType": "II", "ChargeValue": "100.00", "CurrencyCode": "USD"},
        ]

    def test_no_insurance_at_zero(self, build, metric_request):
        request = dataclasses.replace(metric_request, special_services=["DD"])
        services = build(request).get("SpecialService").to_value()
        assert services == [{"SpecialServiceType": "DD"}]


class TestLabelAndOverrides:
    """Test label defaults and caller overrides."""

    def test_label_defaults(self, build, metric_request):
        tree = build(metric_request)
        assert _value(tree, "LabelImageFormat") == "PDF"
        assert _value(tree, "Label.LabelTemplate") == "8X4_A4_PDF"

    def test_label_overrides(self, build, metric_request):
        request = dataclasses.replace(
            metric_request, label_format="ZPL2", label_size="6X4_thermal"
        )
        tree = build(request)
        assert _value(tree, "LabelImageFormat") == "ZPL2"
        assert _value(tree, "Label.LabelTemplate") == "6X4_thermal"

    def test_extra_applied_last(self, build, metric_request):
        request = dataclasses.replace(
            metric_request,
            extra={
                "Billing.DutyAccountNumber": "987654321",
                "ShipmentDetails.Pieces.Piece.0.PackageType": "EE",
                "Consignee.AddressLine2": "Hinterhaus",
            },
        )
        tree = build(request)
        assert _value(tree, "Billing.DutyAccountNumber") == "987654321"
        assert _value(tree, "ShipmentDetails.Pieces.Piece.0.PackageType") == "EE"
        assert _value(tree, "Consignee.AddressLine2") == "Hinterhaus"

    def test_extra_can_null_a_field(self, build, metric_request):
        request = dataclasses.replace(metric_request, extra={"Reference": None})
        assert prune_absent(build(request)).get("Reference") is None
