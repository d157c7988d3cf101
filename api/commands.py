"""
Flask CLI commands.

    flask --app api seed [--reset]
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from decimal import Decimal

import click

from models import storage
from models.category import Category
from models.expense import Expense
from models.user import User
from services.dashboard import month_bounds
from utils.security import hash_password

logger = logging.getLogger(__name__)

DEMO_EMAIL = "demo@xenfi.com"
DEMO_PASSWORD = "password123"

DEMO_CATEGORIES = [
    ("Food & Dining", "Restaurant meals, groceries, and food delivery", "#FF6B6B"),
    ("Transportation", "Gas, public transit, rideshare, car maintenance", "#4ECDC4"),
    ("Entertainment", "Movies, concerts, subscriptions, hobbies", "#95E1D3"),
    ("Shopping", "Clothing, electronics, household items", "#F38181"),
    ("Utilities", "Electricity, water, internet, phone bills", "#AA96DA"),
    ("Healthcare", "Doctor visits, medications, insurance", "#FCBAD3"),
]

# (amount, description, days into month, payment method, category index, months back)
DEMO_EXPENSES = [
    ("45.50", "Grocery shopping at Whole Foods", 2, "Credit Card", 0, 0),
    ("12.99", "Netflix subscription", 5, "Credit Card", 2, 0),
    ("60.00", "Gas station fill-up", 7, "Debit Card", 1, 0),
    ("120.00", "Electricity bill", 10, "Bank Transfer", 4, 0),
    ("85.00", "Dinner at Italian restaurant", 12, "Credit Card", 0, 0),
    ("150.00", "New running shoes", 15, "Credit Card", 3, 0),
    ("35.00", "Doctor copay", 18, "Cash", 5, 0),
    ("250.00", "Concert tickets", 20, "Credit Card", 2, 0),
    ("200.00", "Monthly groceries", 15, "Credit Card", 0, 1),
    ("75.00", "Uber rides", 20, "Credit Card", 1, 1),
]


def seed_demo_data(now: datetime | None = None) -> User:
    """Create the demo account with categories and expenses. Safe to re-run."""
    session = storage.get_session()

    user = session.query(User).filter(User.email == DEMO_EMAIL).first()
    if user is None:
        user = User(email=DEMO_EMAIL, password_hash=hash_password(DEMO_PASSWORD), name="Demo User")
        storage.new(user)
        storage.save()
        logger.info("created demo user %s", user.id)

    categories = []
    for name, description, color in DEMO_CATEGORIES:
        c = (
            session.query(Category)
            .filter(Category.user_id == user.id, Category.name == name)
            .first()
        )
        if c is None:
            c = Category(user_id=user.id, name=name, description=description, color=color)
            storage.new(c)
        categories.append(c)
    storage.save()

    if session.query(Expense).filter(Expense.user_id == user.id).count() == 0:
        this_month, _ = month_bounds(now or datetime.utcnow())
        last_month, _ = month_bounds(this_month - timedelta(days=1))
        for amount, description, day, method, cat_idx, months_back in DEMO_EXPENSES:
            base = last_month if months_back else this_month
            storage.new(Expense(
                user_id=user.id,
                category_id=categories[cat_idx].id,
                amount=Decimal(amount),
                description=description,
                date=base + timedelta(days=day),
                payment_method=method,
            ))
        storage.save()

    return user


@click.command("seed")
@click.option("--reset", is_flag=True, help="Drop and recreate all tables first.")
def seed_command(reset: bool):
    """Load demo data into the database."""
    if reset:
        storage.drop_all()
        storage.reload()
        click.echo("Database reset.")
    user = seed_demo_data()
    click.echo(f"Seed completed for {user.email}")
    click.echo(f"Demo credentials: {DEMO_EMAIL} / {DEMO_PASSWORD}")


def register_commands(app):
    app.cli.add_command(seed_command)
