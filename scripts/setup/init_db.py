# scripts/setup/init_db.py
"""
Initialize database: creates all tables and, optionally, an admin user.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py [--admin-email EMAIL --admin-name NAME]
"""

import argparse
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from datetime import datetime
from apigestion.database import SessionLocal, create_tables, engine
from apigestion.config import settings
from apigestion.models.user import User
from sqlalchemy import inspect, text


def main():
    parser = argparse.ArgumentParser(description="Create ApiGestión tables")
    parser.add_argument("--admin-email", help="Create an admin user with this email if missing")
    parser.add_argument("--admin-name", default="Administrador")
    args = parser.parse_args()

    print("🗄️  ApiGestión DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {engine.url.render_as_string(hide_password=True)}")

    # Test connection
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        print("\nMake sure PostgreSQL is running and DATABASE_URL in .env is correct.")
        sys.exit(1)

    # Create all tables
    print("\n📋 Creating tables...")
    create_tables()
    tables = sorted(inspect(engine).get_table_names())
    print(f"\n📊 Tables in database ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    if args.admin_email:
        db = SessionLocal()
        try:
            if db.query(User).filter(User.email == args.admin_email).first():
                print(f"\nℹ️  User {args.admin_email} already exists")
            else:
                db.add(User(name=args.admin_name, email=args.admin_email, role="admin",
                            is_active=True, created_at=datetime.utcnow()))
                db.commit()
                print(f"\n👤 Admin user {args.admin_email} created")
        finally:
            db.close()

    print("\n🎉 Database ready! You can now start the backend:")
    print(f"   uvicorn apigestion.main:app --host 0.0.0.0 --port {settings.BACKEND_PORT} --reload")


if __name__ == "__main__":
    main()
