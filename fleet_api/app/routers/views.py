from html import escape
from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from ..plates import allowed_transitions
from ..services.vehicles import VehicleService, get_vehicle_service

router = APIRouter(prefix="/views", tags=["views"])

_PAGE = """<!doctype html>
<html lang="en">
<head><meta charset="utf-8"><title>{title}</title></head>
<body style="max-width: 900px; margin: 2rem auto; padding: 0 1rem; font-family: system-ui">
<h1>{title}</h1>
{body}
</body>
</html>
"""


def _page(title: str, body: str, status_code: int = 200) -> HTMLResponse:
    return HTMLResponse(_PAGE.format(title=escape(title), body=body), status_code=status_code)


def _summary_line(summary: Dict[str, Any]) -> str:
    counts = ", ".join(f"{escape(status)}: {count}" for status, count in summary["byStatus"].items())
    return (
        f"<p>{summary['total']} vehicles ({counts}). "
        f"Maintenance cap: {summary['maintenanceCap']}, "
        f"slots left: {summary['maintenanceSlotsLeft']}.</p>"
    )


def _vehicle_rows(vehicles: List[Dict[str, Any]]) -> str:
    if not vehicles:
        return '<tr><td colspan="5" align="center" style="padding: 24px; color: #666">No vehicles yet.</td></tr>'
    rows = []
    for v in vehicles:
        rows.append(
            '<tr style="border-top: 1px solid #ddd">'
            f'<td><a href="/views/vehicles/{escape(v["id"])}">{escape(v["id"])}</a></td>'
            f"<td>{escape(v['licensePlate'])}</td>"
            f"<td>{escape(v['model'])}</td>"
            f"<td>{escape(v['status'])}</td>"
            f"<td>{escape(v['createdAt'])}</td>"
            "</tr>"
        )
    return "\n".join(rows)


@router.get("/vehicles", response_class=HTMLResponse)
def vehicle_list_view(service: VehicleService = Depends(get_vehicle_service)):
    vehicles = sorted(service.list_vehicles(), key=lambda v: v["createdAt"])
    body = (
        _summary_line(service.summary())
        + '<table width="100%" cellpadding="6" style="border-collapse: collapse">'
        + "<thead><tr>"
        + "".join(f'<th align="left">{h}</th>' for h in ("ID", "Plate", "Model", "Status", "Created"))
        + "</tr></thead><tbody>"
        + _vehicle_rows(vehicles)
        + "</tbody></table>"
    )
    return _page("Vehicle Management", body)


@router.get("/vehicles/{vehicle_id}", response_class=HTMLResponse)
def vehicle_detail_view(vehicle_id: str, service: VehicleService = Depends(get_vehicle_service)):
    result = service.get_vehicle(vehicle_id)
    if not result.ok:
        return _page("Vehicle not found", f"<p>{escape(result.error.message)}.</p>", status_code=404)

    vehicle = result.data
    transitions = ", ".join(escape(s) for s in allowed_transitions(vehicle["status"]))
    deletable = "yes" if vehicle["status"] == "Available" else "no (only Available vehicles)"
    body = (
        "<dl>"
        f"<dt>ID</dt><dd>{escape(vehicle['id'])}</dd>"
        f"<dt>Plate</dt><dd>{escape(vehicle['licensePlate'])}</dd>"
        f"<dt>Model</dt><dd>{escape(vehicle['model'])}</dd>"
        f"<dt>Status</dt><dd>{escape(vehicle['status'])}</dd>"
        f"<dt>Created</dt><dd>{escape(vehicle['createdAt'])}</dd>"
        f"<dt>Can move to</dt><dd>{transitions}</dd>"
        f"<dt>Deletable</dt><dd>{deletable}</dd>"
        "</dl>"
        '<p><a href="/views/vehicles">Back to list</a></p>'
    )
    return _page(f"Vehicle {vehicle['licensePlate']}", body)
