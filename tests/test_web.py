import logging

import pytest

from emi_calc_web.app import DEFAULT_FORM, app, cached_compute, parse_contact

CONTACT = {
    "action": "submit_contact",
    "name": "Asha Rao",
    "email": "asha@example.com",
    "phone": "+91 98765 43210",
    "service": "Home loan",
    "message": "Call after 5pm",
}


@pytest.fixture
def client():
    app.config["TESTING"] = True
    cached_compute.cache_clear()
    with app.test_client() as client:
        yield client


def calculate(client, **fields):
    data = dict(DEFAULT_FORM, action="calculate")
    data.update(fields)
    return client.post("/", data=data)


class TestIdle:
    def test_form_prefilled_with_defaults(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        body = resp.get_data(as_text=True)
        assert 'value="270000"' in body
        assert 'value="2026-02-12"' in body
        assert 'id="summary"' not in body

    def test_schedule_request_ignored_before_calculation(self, client):
        body = client.post("/", data={"action": "request_schedule"}).get_data(as_text=True)
        assert 'id="contact-form"' not in body
        assert 'id="summary"' not in body


class TestCalculate:
    def test_computed_state_shows_summary_only(self, client):
        body = calculate(client).get_data(as_text=True)
        assert 'id="summary"' in body
        assert "4,474.68" in body
        assert "52,176.94" in body
        assert "Year 6" in body
        assert "Calculate full schedule" in body
        assert 'id="schedule"' not in body

    def test_quarterly_installment(self, client):
        body = calculate(client, frequency="quarterly").get_data(as_text=True)
        assert "13,424.04" in body
        assert "Quarterly installment" in body

    def test_invalid_parameters_show_reason(self, client):
        body = calculate(client, principal="0").get_data(as_text=True)
        assert "principal must be a positive number" in body
        assert 'id="summary"' not in body

    @pytest.mark.parametrize("rate", ["1e-30", "1e1000"])
    def test_out_of_range_rate_shows_reason(self, client, rate):
        resp = calculate(client, rate=rate, years="100")
        assert resp.status_code == 200
        body = resp.get_data(as_text=True)
        assert "interest rate out of range" in body
        assert 'id="summary"' not in body

    def test_schedule_past_calendar_range_shows_reason(self, client):
        resp = calculate(client, start_date="9999-06-01", years="1")
        assert resp.status_code == 200
        assert "last payment date is past the supported calendar range" in resp.get_data(as_text=True)

    def test_unparseable_input_shows_error(self, client):
        body = calculate(client, rate="six").get_data(as_text=True)
        assert "Invalid numeric value" in body
        assert 'id="summary"' not in body

    def test_state_survives_reload(self, client):
        calculate(client, principal="500000")
        body = client.get("/").get_data(as_text=True)
        assert 'value="500000"' in body
        assert 'id="summary"' in body


class TestRevealWorkflow:
    def test_request_shows_contact_form(self, client):
        calculate(client)
        body = client.post("/", data={"action": "request_schedule"}).get_data(as_text=True)
        assert 'id="contact-form"' in body
        assert 'id="summary"' in body
        assert 'id="schedule"' not in body

    def test_invalid_contact_keeps_result(self, client):
        calculate(client)
        client.post("/", data={"action": "request_schedule"})
        body = client.post("/", data={"action": "submit_contact", "name": "", "email": "nope", "phone": "12"}).get_data(
            as_text=True
        )
        assert "Name is required" in body
        assert "Enter a valid email address" in body
        assert "Enter a valid phone number" in body
        assert 'id="contact-form"' in body
        assert "4,474.68" in body
        assert 'id="schedule"' not in body

    def test_contact_reveals_schedule_and_logs_lead(self, client, caplog):
        caplog.set_level(logging.INFO, logger="emi_calc_web.leads")
        calculate(client, frequency="half-yearly")
        client.post("/", data={"action": "request_schedule"})
        body = client.post("/", data=CONTACT).get_data(as_text=True)
        assert 'id="schedule"' in body
        assert "Half-yearly schedule" in body
        assert "Monthly schedule" in body
        assert 'id="contact-form"' not in body
        assert any("asha@example.com" in r.getMessage() for r in caplog.records)

    def test_engine_runs_once_per_parameter_set(self, client):
        calculate(client)
        client.post("/", data={"action": "request_schedule"})
        client.post("/", data=CONTACT)
        client.get("/")
        info = cached_compute.cache_info()
        assert info.misses == 1
        assert info.hits >= 4

    def test_new_parameters_stay_revealed_after_contact(self, client):
        calculate(client)
        client.post("/", data={"action": "request_schedule"})
        client.post("/", data=CONTACT)
        body = calculate(client, principal="100000").get_data(as_text=True)
        assert 'id="schedule"' in body

    def test_reset_returns_to_idle(self, client):
        calculate(client, principal="100000")
        body = client.post("/", data={"action": "reset"}).get_data(as_text=True)
        assert 'value="270000"' in body
        assert 'id="summary"' not in body


class TestParseContact:
    def test_normalises_phone(self):
        contact = parse_contact(CONTACT)
        assert contact.phone == "+919876543210"
        assert contact.service == "Home loan"

    def test_collects_all_errors(self):
        assert parse_contact({}) == [
            "Name is required",
            "Enter a valid email address",
            "Enter a valid phone number",
        ]
