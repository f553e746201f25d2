"""Reset the system (SQLite) and seed demo data.

Usage:
  python reset_db.py

Deletes josm.db (if present), recreates the tables and creates one user per
role, all with password ``josm123``, plus a starter material catalogue.
"""

import os

from josm import create_app
from josm.extensions import db
from josm.models import User
from josm.services import materials

DB_FILE = "josm.db"

DEMO_USERS = [
    ("Store Keeper", "storekeeper@josm.com", "store_keeper"),
    ("Supervisor John", "supervisor@josm.com", "supervisor"),
    ("Worker Sam", "worker@josm.com", "worker"),
    ("Sales Manager", "sales@josm.com", "sales_warehouse"),
]

STARTER_MATERIALS = [
    {"category": "Breakers", "name": "MCB", "variant": "16A", "unit": "pcs", "quantity": 10, "min_threshold": 5},
    {"category": "Breakers", "name": "MCB", "variant": "32A", "unit": "pcs", "quantity": 10, "min_threshold": 5},
    {"category": "Breakers", "name": "Isolator", "variant": "63A", "unit": "pcs", "quantity": 4, "min_threshold": 2},
    {"category": "Enclosures", "name": "Steel sheet", "variant": "1.2mm", "unit": "sheets", "quantity": 20, "min_threshold": 5},
    {"category": "Cables", "name": "Flex cable", "variant": "2.5mm", "unit": "m", "quantity": 200, "min_threshold": 50},
    {"category": "Hardware", "name": "DIN rail", "variant": None, "unit": "pcs", "quantity": 30, "min_threshold": 10},
]


def reset_database():
    if os.path.exists(DB_FILE):
        os.remove(DB_FILE)

    app = create_app()
    with app.app_context():
        db.create_all()

        for name, email, role in DEMO_USERS:
            u = User(name=name, email=email, role=role, active=True)
            u.set_password("josm123")
            db.session.add(u)
        db.session.commit()

        admin = User.query.filter_by(role="admin").first()
        for data in STARTER_MATERIALS:
            materials.create_material(data, actor=admin)

        print("OK! Database recreated.")
        print(f"Login: {app.config['ADMIN_EMAIL']}  |  Password: {app.config['ADMIN_PASSWORD']}")
        print("Demo users (password josm123):", ", ".join(e for _, e, _ in DEMO_USERS))


if __name__ == "__main__":
    reset_database()
