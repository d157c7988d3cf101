from __future__ import annotations

from flask import Blueprint, request, abort, g
from sqlalchemy.orm import joinedload

from api.errors import success_response
from models import storage
from models.category import Category
from models.expense import Expense
from models.schemas.expense import (
    ExpenseCreateSchema,
    ExpenseUpdateSchema,
    ExpenseFilterSchema,
    ExpenseOutSchema,
)
from utils.decorators import jwt_required

bp = Blueprint("expenses", __name__)

create_schema = ExpenseCreateSchema()
update_schema = ExpenseUpdateSchema(partial=True)
filter_schema = ExpenseFilterSchema()
out_schema = ExpenseOutSchema()
out_list_schema = ExpenseOutSchema(many=True)


def get_owned_expense(session, expense_id: str) -> Expense:
    e = (
        session.query(Expense)
        .options(joinedload(Expense.category))
        .filter(Expense.id == expense_id, Expense.user_id == g.current_user_id)
        .first()
    )
    if not e:
        abort(404, description="Expense not found")
    return e


def ensure_owned_category(session, category_id: str) -> Category:
    c = (
        session.query(Category)
        .filter(Category.id == category_id, Category.user_id == g.current_user_id)
        .first()
    )
    if not c:
        abort(404, description="Category not found")
    return c


@bp.get("/expenses")
@jwt_required()
def list_expenses():
    """
    List the caller's expenses, newest first, with optional filters
    ---
    tags: [Expenses]
    security:
      - Bearer: []
    parameters:
      - in: query
        name: categoryId
        type: string
      - in: query
        name: startDate
        type: string
        format: date-time
        description: "ISO-8601, inclusive"
      - in: query
        name: endDate
        type: string
        format: date-time
        description: "ISO-8601, inclusive"
      - in: query
        name: minAmount
        type: number
      - in: query
        name: maxAmount
        type: number
    responses:
      200: { description: OK }
      422: { description: Invalid filter }
    """
    session = storage.get_session()
    filters = filter_schema.load(request.args.to_dict())

    query = (
        session.query(Expense)
        .options(joinedload(Expense.category))
        .filter(Expense.user_id == g.current_user_id)
    )
    if "category_id" in filters:
        query = query.filter(Expense.category_id == filters["category_id"])
    if "start_date" in filters:
        query = query.filter(Expense.date >= filters["start_date"])
    if "end_date" in filters:
        query = query.filter(Expense.date <= filters["end_date"])
    if "min_amount" in filters:
        query = query.filter(Expense.amount >= filters["min_amount"])
    if "max_amount" in filters:
        query = query.filter(Expense.amount <= filters["max_amount"])

    rows = query.order_by(Expense.date.desc()).all()
    return success_response(out_list_schema.dump(rows))


@bp.get("/expenses/<expense_id>")
@jwt_required()
def get_expense(expense_id: str):
    """
    Get an expense by id
    ---
    tags: [Expenses]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: expense_id
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    session = storage.get_session()
    return success_response(out_schema.dump(get_owned_expense(session, expense_id)))


@bp.post("/expenses")
@jwt_required()
def create_expense():
    """
    Record an expense
    ---
    tags: [Expenses]
    security:
      - Bearer: []
    consumes: [application/json]
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [amount, description, paymentMethod, categoryId]
          properties:
            amount: { type: number, example: 45.5 }
            description: { type: string }
            date: { type: string, format: date-time }
            paymentMethod: { type: string, example: Credit Card }
            attachmentUrl: { type: string }
            categoryId: { type: string }
    responses:
      201: { description: Created }
      404: { description: Category not found }
      422: { description: Validation error }
    """
    session = storage.get_session()
    data = create_schema.load(request.get_json(silent=True) or {})
    category = ensure_owned_category(session, data["category_id"])
    if data.get("date") is None:
        data.pop("date", None)

    e = Expense(user_id=g.current_user_id, **data)
    e.category = category
    storage.new(e)
    storage.save()
    return success_response(out_schema.dump(e), 201)


@bp.route("/expenses/<expense_id>", methods=["PUT", "PATCH"])
@jwt_required()
def update_expense(expense_id: str):
    """
    Update an expense (partial)
    ---
    tags: [Expenses]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: expense_id
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            amount: { type: number }
            description: { type: string }
            date: { type: string, format: date-time }
            paymentMethod: { type: string }
            attachmentUrl: { type: string }
            categoryId: { type: string }
    responses:
      200: { description: OK }
      404: { description: Expense or category not found }
      422: { description: Validation error }
    """
    session = storage.get_session()
    e = get_owned_expense(session, expense_id)
    data = update_schema.load(request.get_json(silent=True) or {})
    if data.get("date", True) is None:
        # date is required on the row; an explicit null leaves it unchanged
        data.pop("date")
    if "category_id" in data:
        e.category = ensure_owned_category(session, data.pop("category_id"))
    for key, value in data.items():
        setattr(e, key, value)
    storage.new(e)
    storage.save()
    return success_response(out_schema.dump(e))


@bp.delete("/expenses/<expense_id>")
@jwt_required()
def delete_expense(expense_id: str):
    """
    Delete an expense
    ---
    tags: [Expenses]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: expense_id
        type: string
        required: true
    responses:
      200: { description: Deleted }
      404: { description: Not found }
    """
    session = storage.get_session()
    e = get_owned_expense(session, expense_id)
    storage.delete(e)
    storage.save()
    return success_response(message="Expense deleted successfully")
