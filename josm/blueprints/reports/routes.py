from datetime import timedelta

from flask import jsonify, request

from josm.errors import ValidationError
from josm.permissions import perm_required
from josm.services import boards, materials, reports, tools
from josm.utils import parse_date
from . import reports_bp

LEDGERS = {
    "materials": materials.list_transactions,
    "tools": tools.list_transactions,
    "boards": boards.list_transactions,
}


def _period():
    start = parse_date(request.args.get("start"))
    end = parse_date(request.args.get("end"))
    if end:
        # end date is inclusive
        end = end + timedelta(days=1)
    return start, end


@reports_bp.get("/summary")
@perm_required("view_reports")
def report_summary():
    return jsonify(reports.summary())


@reports_bp.get("/low-stock")
@perm_required("view_reports")
def report_low_stock():
    return jsonify({
        "materials": [m.to_dict() for m in materials.low_stock_materials()],
        "boards": [b.to_dict() for b in boards.low_stock_boards()],
    })


@reports_bp.get("/transactions/<ledger>")
@perm_required("view_reports")
def report_transactions(ledger):
    if ledger not in LEDGERS:
        raise ValidationError(f"ledger must be one of {', '.join(LEDGERS)}")
    start, end = _period()
    rows = LEDGERS[ledger](start=start, end=end)
    return jsonify([r.to_dict() for r in rows])
