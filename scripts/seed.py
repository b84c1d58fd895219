"""
Initialises the local SQLite storage and applies the one-time state migration.
Run this once before first use, or anytime to repair a missing table.
"""

from printcalc.db import get_connection, get_db_path, init_db, migrate_storage


def main() -> None:
    conn = get_connection()
    init_db(conn)
    wiped = migrate_storage(conn)
    conn.close()
    print(f"Storage initialised at {get_db_path()}.")
    if wiped:
        print("Previous calculator state was cleared for this version.")


if __name__ == "__main__":
    main()
