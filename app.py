"""
Membership Report — HTTP API.

Accepts pasted member-count tables and returns the parsed table, resolved
metric paths, the full report as JSON or the report as an Excel workbook.
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Any, Dict, List, Tuple

from flask import Flask, request, send_file

from membership_report import __version__
from membership_report.config import PipelineConfig
from membership_report.formatting import format_number, format_percent
from membership_report.pipeline import MembershipReportPipeline, ReportInputError

# -------------------------------------------------------
# App Setup
# -------------------------------------------------------

app = Flask(__name__)

app.config["MAX_CONTENT_LENGTH"] = 16 * 1024 * 1024

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# -------------------------------------------------------
# Pipeline Setup
# -------------------------------------------------------

pipeline = MembershipReportPipeline(
    config=PipelineConfig(log_level=logging.WARNING)
)

# -------------------------------------------------------
# Helpers
# -------------------------------------------------------

def read_pasted_text() -> str:
    """Pull the pasted table from JSON ``text``, form field ``data`` or the raw body."""
    if request.is_json:
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict) or "text" not in payload:
            raise ReportInputError("JSON body must contain a 'text' field")
        text = payload["text"]
        if not isinstance(text, str):
            raise ReportInputError("'text' must be a string")
        return text

    if "data" in request.form:
        return request.form["data"]

    raw = request.get_data(cache=True)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ReportInputError("Request body is not UTF-8 text") from exc


def error_response(message: str, status: int) -> Tuple[Dict[str, Any], int]:
    return {"success": False, "error": message}, status


def formatted_sections(sections: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Add display strings next to the raw numbers for simple clients."""
    out = []
    for section in sections:
        rows = []
        for row in section["rows"]:
            fmt = format_percent if row["is_percent"] else format_number
            display = {
                "values": [fmt(v) for v in row["values"]],
                "subtotal": fmt(row["subtotal"]),
            }
            if "grand_total" in row:
                display["grand_total"] = fmt(row["grand_total"])
            rows.append({**row, "display": display})
        out.append({**section, "rows": rows})
    return out


# -------------------------------------------------------
# API
# -------------------------------------------------------

@app.errorhandler(ReportInputError)
def handle_input_error(exc: ReportInputError):
    return error_response(str(exc), 400)


@app.route("/api/parse", methods=["POST"])
def api_parse():
    """Parse pasted text and return the table with its input preview."""
    text = read_pasted_text()
    try:
        table = pipeline.parse(text)
        return {
            "success": not table.is_empty,
            "table": table.to_dict(),
            "preview_headers": list(pipeline.config.report.preview_headers),
            "preview": pipeline.builder.preview(table),
        }, 200
    except Exception as e:
        logger.exception("API Error")
        return error_response(str(e), 500)


@app.route("/api/report", methods=["POST"])
def api_report():
    """Build the full report from pasted text."""
    text = read_pasted_text()
    try:
        output = pipeline.build_report(text)
        body = output.to_dict()
        body["report"]["sections"] = formatted_sections(body["report"]["sections"])
        return body, 200
    except Exception as e:
        logger.exception("API Error")
        return error_response(str(e), 500)


@app.route("/api/resolve", methods=["POST"])
def api_resolve():
    """Resolve metric paths: ``{"text": ..., "paths": ["NE Books/1", ...]}``."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return error_response("Expected a JSON object", 400)

    text = payload.get("text")
    paths = payload.get("paths")
    if not isinstance(text, str):
        return error_response("'text' must be a string", 400)
    if not isinstance(paths, list) or not all(isinstance(p, str) for p in paths):
        return error_response("'paths' must be a list of strings", 400)

    try:
        table = pipeline.parse(text)
        results = []
        for path in paths:
            resolution = pipeline.resolve(table, path)
            results.append({"path": path, **resolution.to_dict()})
        return {"success": True, "period": table.period, "results": results}, 200
    except Exception as e:
        logger.exception("API Error")
        return error_response(str(e), 500)


@app.route("/api/report.xlsx", methods=["POST"])
def api_report_xlsx():
    """Build the report and return it as an Excel download."""
    text = read_pasted_text()
    try:
        table = pipeline.parse(text)
        output = pipeline.build_report(table)
        data = pipeline.builder.to_xlsx(output.report, table=table)
    except Exception as e:
        logger.exception("API Error")
        return error_response(str(e), 500)

    filename = f"membership_report_{output.report.report_month}.xlsx"
    return send_file(
        BytesIO(data),
        mimetype=XLSX_MIMETYPE,
        as_attachment=True,
        download_name=filename,
    )


@app.route("/api/health", methods=["GET"])
def api_health():
    """Health check endpoint."""
    return {
        "status": "online",
        "version": __version__,
        "endpoints": ["/api/parse", "/api/report", "/api/resolve", "/api/report.xlsx"],
    }, 200


@app.route("/")
def home():
    return {
        "status": "membership report server running",
        "message": "Use /api/health to check server status",
        "endpoints": ["/api/parse", "/api/report", "/api/resolve", "/api/report.xlsx"],
    }


if __name__ == "__main__":
    print("=" * 60)
    print("Membership Report Server Running")
    print("http://localhost:5000")
    print("=" * 60)

    app.run(host="0.0.0.0", port=5000, debug=True)
