#!/usr/bin/env python3
"""
Database initialization script for the School Marksheet System
Run this script to set up the database with initial data

    python init_db.py            create tables and the admin account
    python init_db.py --reset    drop everything first (asks for confirmation)
    python init_db.py --sample   also load the sample school
"""

import argparse

from app import create_app
from database import reset_database
from sample_data import create_sample_data

def main():
    """Main function to initialize database"""
    parser = argparse.ArgumentParser(description="Initialize the marksheet database")
    parser.add_argument('--reset', action='store_true', help="drop and recreate all tables")
    parser.add_argument('--sample', action='store_true', help="load sample classes, students and marks")
    args = parser.parse_args()

    # create_app creates the tables and the admin account
    app = create_app()

    if args.reset:
        print("WARNING: This will delete all existing data!")
        confirm = input("Are you sure you want to reset the database? (yes/no): ")
        if confirm.lower() == 'yes':
            reset_database(app)
            print("Database reset completed.")
        else:
            print("Database reset cancelled.")
            return

    if args.sample:
        create_sample_data(app)

    print(f"Database ready. Default admin login: admin / {app.config['DEFAULT_ADMIN_PASSWORD']}")

if __name__ == '__main__':
    main()
