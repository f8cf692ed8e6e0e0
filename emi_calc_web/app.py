"""Flask front end for the EMI calculator.

The page walks through four states: the empty form (idle), a computed
summary, the contact form shown when the full schedule is requested, and the
revealed schedule once contact details are submitted. The engine runs once
per parameter set; later steps reuse the cached result.
"""

import logging
import os
import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Dict, List, Optional, Tuple, Union

from flask import Flask, render_template, request, session

from emi_calc.data_models import Frequency, LoanParameters, NoSchedule, ScheduleResult
from emi_calc.engine import compute_schedule
from emi_calc.utils import parse_amount, parse_date, parse_percent

app = Flask(__name__)
app.config["ASSET_VERSION"] = os.environ.get("ASSET_VERSION", "1")
app.secret_key = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")

LOG_LEVEL = os.environ.get("EMI_CALC_LOG_LEVEL", "INFO").upper()
logger = logging.getLogger(__name__)
logger.setLevel(LOG_LEVEL)
lead_logger = logging.getLogger("emi_calc_web.leads")
lead_logger.setLevel(LOG_LEVEL)

DEFAULT_FORM = {
    "principal": "270000",
    "rate": "6",
    "years": "6",
    "extra_months": "0",
    "start_date": "2026-02-12",
    "frequency": Frequency.MONTHLY.value,
}

FREQUENCY_LABELS = {
    Frequency.MONTHLY.value: "Monthly",
    Frequency.QUARTERLY.value: "Quarterly",
    Frequency.HALF_YEARLY.value: "Half-yearly",
}

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_RE = re.compile(r"^\+?\d{7,15}$")


class WorkflowState(Enum):
    IDLE = "idle"
    COMPUTED = "computed"
    AWAITING_CONTACT = "awaiting_contact"
    REVEALED = "revealed"


@dataclass(frozen=True)
class ContactRecord:
    name: str
    email: str
    phone: str
    service: str
    message: str


# LoanParameters is frozen and hashable, so equal inputs share one result.
cached_compute = lru_cache(maxsize=256)(compute_schedule)


def form_to_parameters(form: Dict[str, str]) -> LoanParameters:
    """Build ``LoanParameters`` from form fields; raises ``ValueError``."""
    try:
        years = int(form.get("years", "0") or 0)
        extra_months = int(form.get("extra_months", "0") or 0)
    except ValueError as exc:
        raise ValueError("Term years and extra months must be whole numbers") from exc
    return LoanParameters(
        principal=parse_amount(form.get("principal", "")),
        annual_rate_percent=parse_percent(form.get("rate", "")),
        term_years=years,
        extra_months=extra_months,
        start_date=parse_date(form.get("start_date", "")),
        frequency=Frequency.parse(form.get("frequency", Frequency.MONTHLY.value)),
    )


def parse_contact(form) -> Union[ContactRecord, List[str]]:
    """Return a ``ContactRecord`` or the list of validation errors."""
    name = form.get("name", "").strip()
    email = form.get("email", "").strip()
    phone = re.sub(r"[\s\-()]", "", form.get("phone", ""))
    errors: List[str] = []
    if not name:
        errors.append("Name is required")
    if not EMAIL_RE.match(email):
        errors.append("Enter a valid email address")
    if not PHONE_RE.match(phone):
        errors.append("Enter a valid phone number")
    if errors:
        return errors
    return ContactRecord(
        name=name,
        email=email,
        phone=phone,
        service=form.get("service", "").strip(),
        message=form.get("message", "").strip(),
    )


def _compute(form: Dict[str, str]) -> Union[ScheduleResult, NoSchedule]:
    try:
        params = form_to_parameters(form)
    except ValueError as exc:
        return NoSchedule(str(exc))
    return cached_compute(params)


def _handle_calculate(form: Dict[str, str]) -> WorkflowState:
    result = _compute(form)
    if isinstance(result, NoSchedule):
        logger.info("No schedule for %s: %s", form, result.reason)
        return WorkflowState.IDLE
    if session.get("contact_submitted"):
        return WorkflowState.REVEALED
    return WorkflowState.COMPUTED


def _handle_contact(state: WorkflowState) -> Tuple[WorkflowState, List[str]]:
    contact = parse_contact(request.form)
    if isinstance(contact, list):
        return state, contact
    lead_logger.info(
        "Contact submitted: name=%s email=%s phone=%s service=%s",
        contact.name,
        contact.email,
        contact.phone,
        contact.service or "-",
    )
    session["contact_submitted"] = True
    return WorkflowState.REVEALED, []


@app.template_filter("money")
def money(value) -> str:
    return f"{value:,.2f}"


@app.route("/", methods=["GET", "POST"])
def index():
    form = dict(session.get("loan_form", DEFAULT_FORM))
    state = WorkflowState(session.get("state", WorkflowState.IDLE.value))
    contact_errors: List[str] = []
    action = None

    if request.method == "POST":
        action = request.form.get("action", "calculate")
        if action == "calculate":
            form = {key: request.form.get(key, default).strip() for key, default in DEFAULT_FORM.items()}
            state = _handle_calculate(form)
        elif action == "request_schedule" and state == WorkflowState.COMPUTED:
            state = WorkflowState.AWAITING_CONTACT
        elif action == "submit_contact" and state == WorkflowState.AWAITING_CONTACT:
            state, contact_errors = _handle_contact(state)
        elif action == "reset":
            form = dict(DEFAULT_FORM)
            state = WorkflowState.IDLE
        session["loan_form"] = form
        session["state"] = state.value

    result: Optional[Union[ScheduleResult, NoSchedule]] = None
    error = None
    if action == "calculate" or state != WorkflowState.IDLE:
        result = _compute(form)
        if isinstance(result, NoSchedule):
            error = result.reason
            result = None

    return render_template(
        "index.html",
        form=form,
        state=state.value,
        result=result,
        error=error,
        contact_errors=contact_errors,
        frequency_labels=FREQUENCY_LABELS,
        show_schedule=state == WorkflowState.REVEALED,
        asset_version=app.config["ASSET_VERSION"],
    )


if __name__ == "__main__":
    print("Starting EMI Calculator web app...")
    app.run(host="0.0.0.0", port=8710, debug=True)
