#!/usr/bin/env python3
"""Seed a demo kitchen.

Creates the default back-office accounts, a stocked inventory and a few
costed recipes. Safe to re-run: existing data is cleared first.

Usage:
    python scripts/seed_demo_data.py

    # Or against another database:
    DATABASE_URL=sqlite:///./demo.db python scripts/seed_demo_data.py
"""

import os
import sys
from datetime import date, timedelta

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from backoffice.database import SessionLocal, init_db
from backoffice.models import AuditLog, Notification, Recipe, RecipeIngredient, StockItem, User
from backoffice.models.enums import UserRole
from backoffice.services.auth import create_user
from backoffice.services.inventory_service import InventoryService
from backoffice.services.recipe_service import RecipeService

# Change these passwords after the first login
DEFAULT_USERS = [
    ("owner@marios.com", "Owner@123", "Owner", UserRole.ADMIN),
    ("assistantmanager@marios.com", "Manager@123", "Assistant Manager", UserRole.MANAGER),
    ("waiter@marios.com", "Staff@123", "Waiter", UserRole.STAFF),
]

# (name, quantity, unit, total batch cost, category, days to expiry, reorder threshold in base units)
STOCK = [
    ("Chicken Breast", 15, "kg", 85.00, "Protein", 14, 3000),
    ("Salmon Fillet", 5, "kg", 180.00, "Seafood", 5, 1000),
    ("Tomatoes", 12, "kg", 25.00, "Vegetables", 8, 2000),
    ("Garlic", 2, "kg", 45.00, "Vegetables", 20, 250),
    ("Broccoli", 7, "kg", 38.00, "Vegetables", 8, 1000),
    ("Carrots", 10, "kg", 15.00, "Vegetables", 21, 1000),
    ("Mozzarella", 5, "kg", 85.00, "Dairy", 15, 1000),
    ("Parmesan", 3, "kg", 180.00, "Dairy", 60, 500),
    ("Cream", 8, "l", 45.00, "Dairy", 10, 1000),
    ("Butter", 4, "kg", 65.00, "Dairy", 30, 500),
    ("Eggs", 30, "ea", 2.50, "Dairy", 21, 12),
    ("Pasta", 15, "kg", 35.00, "Grains", 365, 3000),
    ("Flour", 20, "kg", 22.00, "Grains", 180, 5000),
    ("Olive Oil", 10, "l", 120.00, "Oils", 365, 1000),
    ("Tomato Sauce", 12, "kg", 35.00, "Sauces", 180, 2000),
    ("Basil", 1, "kg", 45.00, "Herbs", 7, 100),
    ("Lemon", 20, "ea", 30.00, "Produce", 14, 5),
]

# (name, dish type, instructions, [(ingredient, quantity, unit)])
RECIPES = [
    (
        "Margherita Pizza",
        "Pizza",
        "Stretch the dough, add sauce and cheese, bake at 250C for 8 minutes.",
        [
            ("Flour", 0.3, "kg"),
            ("Tomato Sauce", 0.15, "kg"),
            ("Mozzarella", 0.25, "kg"),
            ("Basil", 0.01, "kg"),
            ("Olive Oil", 0.02, "l"),
        ],
    ),
    (
        "Chicken Alfredo",
        "Pasta",
        "Cook pasta, sear chicken, reduce cream with butter, garlic and parmesan.",
        [
            ("Pasta", 0.4, "kg"),
            ("Chicken Breast", 0.3, "kg"),
            ("Cream", 0.3, "l"),
            ("Parmesan", 0.1, "kg"),
            ("Butter", 0.05, "kg"),
            ("Garlic", 0.02, "kg"),
        ],
    ),
    (
        "Grilled Salmon",
        "Seafood",
        "Grill the salmon, steam the vegetables, finish with lemon and oil.",
        [
            ("Salmon Fillet", 0.25, "kg"),
            ("Olive Oil", 0.02, "l"),
            ("Lemon", 1, "ea"),
            ("Broccoli", 0.15, "kg"),
            ("Carrots", 0.1, "kg"),
        ],
    ),
]


def seed_demo_data():
    """Seed the database with a demo kitchen."""
    init_db()
    session = SessionLocal()

    try:
        print("Clearing existing data...")
        for model in (RecipeIngredient, Recipe, StockItem, Notification, AuditLog, User):
            session.query(model).delete()
        session.commit()

        print("Creating default users...")
        for email, password, name, role in DEFAULT_USERS:
            create_user(session, email, password, name, role)

        print("Stocking inventory...")
        inventory = InventoryService(session)
        today = date.today()
        for name, qty, unit, cost, category, days, threshold in STOCK:
            inventory.add_item(
                name=name,
                quantity=qty,
                unit=unit,
                total_cost=cost,
                reorder_threshold=threshold,
                category=category,
                expiry=today + timedelta(days=days),
            )

        print("Costing recipes...")
        recipes = RecipeService(session)
        for name, dish_type, instructions, lines in RECIPES:
            recipe = recipes.create_recipe(
                name=name,
                dish_type=dish_type,
                instructions=instructions,
                ingredients=[{"name": n, "quantity": q, "unit": u} for n, q, u in lines],
            )
            print(f"  {recipe.name}: {recipe.total_cost:.2f}")

        print("Demo data seeded successfully!")

    except Exception as e:
        session.rollback()
        print(f"Error seeding demo data: {e}")
        raise
    finally:
        session.close()


if __name__ == "__main__":
    seed_demo_data()
