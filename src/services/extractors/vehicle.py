"""Vehicle registration (REVS) security check."""

from src.utils.formatters import NA, LONG_DATE, SHORT_DATE, format_date
from src.utils.payload import dig, first_non_empty, pick, record_list, records

from .common import ReportFields, empty_row, esc, esc_first, resolve_now, sort_by_date, table_row


def _vehicle(data):
    vehicle = pick(data, "vehicle", "vehicleDetails", default={})
    return vehicle if isinstance(vehicle, dict) else {}


def _history_rows(history) -> str:
    rows = [
        table_row(
            format_date(first_non_empty(h.get("date"), h.get("eventDate")), SHORT_DATE),
            esc_first(h.get("event"), h.get("type")),
            esc(h.get("state")),
            esc_first(h.get("plate"), h.get("registrationNumber")),
        )
        for h in sort_by_date(history, "date", "eventDate")
    ]
    return "".join(rows) or empty_row("No registration history recorded", 4)


def _written_off_rows(records_) -> str:
    rows = [
        table_row(
            esc_first(r.get("type"), r.get("category")),
            esc(r.get("state")),
            format_date(first_non_empty(r.get("date"), r.get("incidentDate")), SHORT_DATE),
            esc_first(r.get("incident"), r.get("damage"), r.get("description")),
        )
        for r in records_
    ]
    return "".join(rows) or empty_row("No written-off records found", 4)


def extract_vehicle_data(data, business=None, report_type=None, now=None) -> ReportFields:
    now = resolve_now(now)
    rdata = data.get("rdata") if isinstance(data.get("rdata"), dict) else data
    vehicle = _vehicle(rdata)
    registration = pick(rdata, "registration", default={}) or {}
    if not isinstance(registration, dict):
        registration = {}

    stolen = record_list(pick(rdata, "stolen", "stolenRecords", default=[]))
    written_off = record_list(pick(rdata, "writtenOff", "writtenOffRecords", default=[]))
    history = record_list(pick(rdata, "registrationHistory", "history", default=[]))

    ppsr = pick(rdata, "ppsr", "securityInterests", default={})
    if isinstance(ppsr, list):
        security_count = len(ppsr)
    else:
        security_count = len(records(dig(ppsr, "items"))) if isinstance(ppsr, dict) else 0

    vin = first_non_empty(vehicle.get("vin"), rdata.get("vin"))
    title = " ".join(
        str(v) for v in (vehicle.get("year"), vehicle.get("make"), vehicle.get("model")) if v
    )

    fields = ReportFields(
        vehicle_vin=esc(vin),
        vehicle_title=esc(title),
        vehicle_make=esc(vehicle.get("make")),
        vehicle_model=esc(vehicle.get("model")),
        vehicle_year=esc(vehicle.get("year")),
        vehicle_colour=esc_first(vehicle.get("colour"), vehicle.get("color")),
        vehicle_body_type=esc(vehicle.get("bodyType")),
        vehicle_engine_number=esc(vehicle.get("engineNumber")),
        registration_plate=esc_first(registration.get("plate"), registration.get("plateNumber")),
        registration_state=esc(registration.get("state")),
        registration_expiry=format_date(registration.get("expiryDate"), LONG_DATE),
        registration_status=esc(registration.get("status")),
        stolen_status="STOLEN" if stolen else "Not reported stolen",
        stolen_badge="critical" if stolen else "ok",
        stolen_details=esc_first(*(s.get("details") or s.get("summary") for s in stolen), default="")
        if stolen else "",
        written_off_status=f"{len(written_off)} written-off record(s)" if written_off else "Not recorded as written off",
        written_off_badge="critical" if written_off else "ok",
        written_off_rows=_written_off_rows(written_off),
        registration_history_rows=_history_rows(history),
        security_interest_count=security_count,
        search_number=esc_first(rdata.get("searchNumber"), rdata.get("uuid")),
        search_date=format_date(first_non_empty(rdata.get("searchDate"), default=now), LONG_DATE),
        company_type="revs",
        companyName=esc(first_non_empty(title, vin)),
        acn=NA,
        abn=NA,
    )
    fields.section("stolen", bool(stolen))
    fields.section("written_off", bool(written_off))
    return fields
