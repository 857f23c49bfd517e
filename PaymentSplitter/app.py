from flask import Flask, request, jsonify, make_response
import io
import logging

from config.settings import get_settings
from dataset import trip_from_dict
from report import render_report, render_html

# PDF generation - using xhtml2pdf for HTML to PDF conversion
from xhtml2pdf import pisa

app = Flask(__name__)
logger = logging.getLogger(__name__)


# ------------------ HELPERS ------------------

def _trip_from_request():
    """Build a trip from the JSON request body; ValueError on bad input."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValueError("request body must be a JSON trip document")
    return trip_from_dict(data, tolerance=get_settings().tolerance)


def _export_filename(trip):
    return f"{trip.label.replace(' ', '_')}_{trip.year}_settlement.pdf"


@app.errorhandler(ValueError)
def bad_trip(e):
    return jsonify({"error": str(e)}), 400


# ------------------ ROUTES ------------------

@app.route("/report", methods=["POST"])
def report():
    trip = _trip_from_request()
    response = make_response(render_report(trip))
    response.headers["Content-Type"] = "text/plain; charset=utf-8"
    return response


# ------------------ PDF EXPORT ------------------
# PDF includes: trip title, balances before, payments, balances after

@app.route("/export-pdf", methods=["POST"])
def export_pdf():
    trip = _trip_from_request()

    pdf_buffer = io.BytesIO()
    result = pisa.CreatePDF(io.StringIO(render_html(trip)), dest=pdf_buffer)
    if result.err:
        logger.error("PDF rendering failed for %s %d", trip.label, trip.year)
        return jsonify({"error": "PDF rendering failed"}), 500
    pdf_buffer.seek(0)

    response = make_response(pdf_buffer.read())
    response.headers['Content-Type'] = 'application/pdf'
    response.headers['Content-Disposition'] = f'attachment; filename={_export_filename(trip)}'

    return response


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000)
