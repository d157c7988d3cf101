from __future__ import annotations

from flask import Blueprint, request, abort, g

from api.errors import success_response
from models import storage
from models.category import Category
from models.expense import Expense
from models.schemas.category import (
    CategoryCreateSchema,
    CategoryUpdateSchema,
    CategoryOutSchema,
)
from utils.decorators import jwt_required

bp = Blueprint("categories", __name__)

create_schema = CategoryCreateSchema()
update_schema = CategoryUpdateSchema()
out_schema = CategoryOutSchema()
out_list_schema = CategoryOutSchema(many=True)


def get_owned_category(session, category_id: str) -> Category:
    c = (
        session.query(Category)
        .filter(Category.id == category_id, Category.user_id == g.current_user_id)
        .first()
    )
    if not c:
        abort(404, description="Category not found")
    return c


def name_taken(session, name: str, exclude_id: str | None = None) -> bool:
    q = session.query(Category).filter(
        Category.user_id == g.current_user_id, Category.name == name
    )
    if exclude_id:
        q = q.filter(Category.id != exclude_id)
    return session.query(q.exists()).scalar()


@bp.get("/categories")
@jwt_required()
def list_categories():
    """
    List the caller's categories, newest first
    ---
    tags: [Categories]
    security:
      - Bearer: []
    responses:
      200: { description: OK }
      401: { description: Unauthorized }
    """
    session = storage.get_session()
    rows = (
        session.query(Category)
        .filter(Category.user_id == g.current_user_id)
        .order_by(Category.created_at.desc())
        .all()
    )
    return success_response(out_list_schema.dump(rows))


@bp.get("/categories/<category_id>")
@jwt_required()
def get_category(category_id: str):
    """
    Get a category by id
    ---
    tags: [Categories]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: category_id
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    session = storage.get_session()
    return success_response(out_schema.dump(get_owned_category(session, category_id)))


@bp.post("/categories")
@jwt_required()
def create_category():
    """
    Create a category
    ---
    tags: [Categories]
    security:
      - Bearer: []
    consumes: [application/json]
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            name: { type: string, maxLength: 64 }
            description: { type: string }
            color: { type: string, example: "#4ECDC4" }
    responses:
      201: { description: Created }
      409: { description: Name already exists }
      422: { description: Validation error }
    """
    session = storage.get_session()
    data = create_schema.load(request.get_json(silent=True) or {})
    data["name"] = data["name"].strip()
    if name_taken(session, data["name"]):
        abort(409, description="Category with this name already exists")
    c = Category(user_id=g.current_user_id, **data)
    storage.new(c)
    storage.save()
    return success_response(out_schema.dump(c), 201)


@bp.route("/categories/<category_id>", methods=["PUT", "PATCH"])
@jwt_required()
def update_category(category_id: str):
    """
    Update a category (partial)
    ---
    tags: [Categories]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: category_id
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            name: { type: string, maxLength: 64 }
            description: { type: string }
            color: { type: string }
    responses:
      200: { description: OK }
      404: { description: Not found }
      409: { description: Name already exists }
      422: { description: Validation error }
    """
    session = storage.get_session()
    c = get_owned_category(session, category_id)
    data = update_schema.load(request.get_json(silent=True) or {})
    if "name" in data:
        data["name"] = data["name"].strip()
        if data["name"] != c.name and name_taken(session, data["name"], exclude_id=c.id):
            abort(409, description="Category with this name already exists")
    for key, value in data.items():
        setattr(c, key, value)
    storage.new(c)
    storage.save()
    return success_response(out_schema.dump(c))


@bp.delete("/categories/<category_id>")
@jwt_required()
def delete_category(category_id: str):
    """
    Delete a category that has no expenses
    ---
    tags: [Categories]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: category_id
        type: string
        required: true
    responses:
      200: { description: Deleted }
      400: { description: Category still has expenses }
      404: { description: Not found }
    """
    session = storage.get_session()
    c = get_owned_category(session, category_id)
    in_use = session.query(
        session.query(Expense).filter(Expense.category_id == c.id).exists()
    ).scalar()
    if in_use:
        abort(400, description="Cannot delete category with associated expenses")
    storage.delete(c)
    storage.save()
    return success_response(message="Category deleted successfully")
