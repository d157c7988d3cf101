from flask import Blueprint, request, g

from api.errors import success_response
from models import storage
from models.schemas.dashboard import DashboardQuerySchema
from services.dashboard import get_dashboard_stats
from utils.decorators import jwt_required

bp = Blueprint("dashboard", __name__)

query_schema = DashboardQuerySchema()


@bp.get("/dashboard")
@jwt_required()
def dashboard():
    """
    Spending summary for a period (defaults to the current month)
    ---
    tags: [Dashboard]
    security:
      - Bearer: []
    parameters:
      - in: query
        name: startDate
        type: string
        format: date-time
      - in: query
        name: endDate
        type: string
        format: date-time
    responses:
      200:
        description: Totals, per-category breakdown and the 10 most recent expenses
      422:
        description: Invalid period
    """
    query = query_schema.load(request.args.to_dict())
    stats = get_dashboard_stats(
        storage.get_session(),
        g.current_user_id,
        start=query.get("start_date"),
        end=query.get("end_date"),
    )
    return success_response(stats)
