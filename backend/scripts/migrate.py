#!/usr/bin/env python3
import subprocess
import sys

def run_migrations(target: str = "head"):
    try:
        print(f"Running database migrations (target: {target})...")
        subprocess.run(["alembic", "upgrade", target], check=True)
        print("Migrations completed successfully!")
    except subprocess.CalledProcessError as e:
        print(f"Migration failed: {e}")
        sys.exit(1)
    except FileNotFoundError:
        print("Alembic not found. Make sure it's installed.")
        sys.exit(1)

def reconcile_budgets():
    """Bring every budget's spent_amount in line with the ledger after a migration"""
    from app.db import SessionLocal
    from app.services.budget_rollup_service import reconcile_all_budgets

    db = SessionLocal()
    try:
        updated = reconcile_all_budgets(db)
        print(f"Reconciled {updated} budgets")
    finally:
        db.close()

if __name__ == "__main__":
    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    run_migrations(args[0] if args else "head")
    if "--reconcile" in sys.argv:
        reconcile_budgets()
