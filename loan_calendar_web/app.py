import logging
from datetime import date
from typing import Any, Optional

from flask import Flask, jsonify, request

from loan_calendar.config import AppConfig
from loan_calendar.engine import (
    compute_loan_metrics,
    compute_portfolio_metrics,
    generate_repayment_schedule,
    summarize_portfolio,
    summarize_schedule,
)
from loan_calendar.exceptions import LoanCalendarError, LoanDataError
from loan_calendar.loaders import holidays_from_list, loan_from_dict, loans_from_list, serialize_schedule, serialize_value
from loan_calendar.logging import setup_logging
from loan_calendar.utils import parse_iso_date

logger = logging.getLogger(__name__)


def _request_payload() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise LoanDataError("Request body must be a JSON object")
    return payload


def _payload_today(payload: dict) -> Optional[date]:
    raw = payload.get("today")
    if not raw:
        return None
    try:
        return parse_iso_date(str(raw))
    except ValueError as exc:
        raise LoanDataError(str(exc)) from exc


def _error(message: str, status: int = 400):
    return jsonify({"error": message}), status


def create_app(config: Optional[AppConfig] = None) -> Flask:
    """Build the JSON API used by the reporting layer.

    Every endpoint accepts raw loan/holiday records in the same shapes as the
    CLI files and answers with unformatted numbers and ISO dates.
    """
    app_config = config or AppConfig.from_env()
    app = Flask(__name__)
    app.config["LOAN_CALENDAR"] = app_config

    @app.errorhandler(LoanCalendarError)
    def handle_loan_calendar_error(exc: LoanCalendarError):
        logger.info("Rejected %s %s: %s", request.method, request.path, exc)
        return _error(str(exc))

    @app.get("/health")
    def health():
        return jsonify({"status": "ok"})

    @app.post("/api/schedule")
    def schedule():
        payload = _request_payload()
        loan = loan_from_dict(payload.get("loan"))
        holidays = holidays_from_list(payload.get("holidays"))
        entries = generate_repayment_schedule(loan, holidays, app_config.engine)
        return jsonify(
            {
                "schedule": serialize_schedule(entries),
                "summary": serialize_value(summarize_schedule(entries)),
                "count": len(entries),
            }
        )

    @app.post("/api/metrics")
    def metrics():
        payload = _request_payload()
        loan = loan_from_dict(payload.get("loan"))
        holidays = holidays_from_list(payload.get("holidays"))
        snapshot = compute_loan_metrics(loan, holidays, _payload_today(payload), app_config.engine)
        return jsonify({"metrics": serialize_value(snapshot)})

    @app.post("/api/portfolio/metrics")
    def portfolio_metrics():
        payload = _request_payload()
        loans = loans_from_list(payload.get("loans"))
        holidays = holidays_from_list(payload.get("holidays"))
        results = compute_portfolio_metrics(loans, holidays, _payload_today(payload), app_config.engine)
        summary = summarize_portfolio(snapshot for _, snapshot in results)
        logger.info("Computed portfolio metrics for %d loans", len(results), extra={"loan_count": len(results)})
        body: dict[str, Any] = {
            "loans": [
                {"loanId": loan_id, "metrics": serialize_value(snapshot)}
                for loan_id, snapshot in results
            ],
            "summary": serialize_value(summary),
        }
        return jsonify(body)

    return app


if __name__ == "__main__":
    settings = AppConfig.from_env()
    setup_logging(settings.log_level, settings.log_format)
    logger.info("Starting loan calendar API...")
    create_app(settings).run(host="0.0.0.0", port=8710, debug=True)
