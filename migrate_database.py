# migrate_database.py
"""
Bring an existing users database up to the current schema.
Run this once against a database file created by an older release.
"""

import sys

from app.config import settings
from app.database import AccountStore, StoreUnavailableError


def migrate_database(db_path: str = settings.database_path) -> bool:
    """Create the users table or add missing columns, then print the schema"""
    print(f"Starting database migration for {db_path}...")

    store = AccountStore(db_path)
    try:
        store.initialize()

        print("\n📊 Users table columns:")
        for name in store.table_columns():
            print(f"   - {name}")

        print(f"\n👥 Users in database: {len(store.get_all_users())}")
        print("\n✅ Database migration completed successfully!")
        return True

    except StoreUnavailableError as e:
        print(f"\n❌ Migration failed: {str(e.__cause__ or e)}")
        return False

    finally:
        store.close()


if __name__ == "__main__":
    path = sys.argv[1] if len(sys.argv) > 1 else settings.database_path
    sys.exit(0 if migrate_database(path) else 1)
