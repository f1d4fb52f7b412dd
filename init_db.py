#!/usr/bin/env python
"""Database initialization script for the content backend.

This script creates all database tables based on the SQLAlchemy models.
Run this once before starting the application for the first time, or use
``alembic upgrade head`` to manage the schema through migrations.

Usage:
    python init_db.py
"""

import os
import sys
from sqlalchemy.exc import SQLAlchemyError
from app import create_app, db


def init_database():
    """Initialize the database by creating all tables."""

    config_name = os.getenv('FLASK_ENV', 'development')
    app = create_app(config_name)

    print(f"\n{'='*60}")
    print(f"Database Initialization for {config_name.upper()} Environment")
    print(f"{'='*60}\n")

    with app.app_context():
        try:
            print("Creating database tables...")
            print(f"Database URI: {app.config['SQLALCHEMY_DATABASE_URI']}\n")

            db.create_all()

            print("✅ Database tables created successfully!\n")

            tables_info = [
                ("users", "User accounts and authentication"),
                ("categories", "Category tree used to filter posts"),
                ("posts", "Content records in the default language"),
                ("post_categories", "Post to category links"),
                ("translations", "Per-language values of translatable fields"),
                ("media", "Gallery images attached to posts"),
                ("favourite_posts", "Per-user favourite posts"),
                ("user_post_histories", "Posts opened by each user"),
                ("faqs", "Frequently asked questions"),
            ]

            print("Created tables:")
            for table_name, description in tables_info:
                print(f"  ✓ {table_name:<25} - {description}")

            print(f"\n{'='*60}")
            print("✅ Database initialization complete!")
            print(f"{'='*60}\n")
            print("Next steps:")
            print("  1. Start the Flask server: python wsgi.py")
            print("  2. Test registration endpoint: POST /api/auth/register")
            print("\n")

            return True

        except SQLAlchemyError as e:
            print(f"❌ Error creating database: {e}\n")
            return False


if __name__ == '__main__':
    success = init_database()
    sys.exit(0 if success else 1)
