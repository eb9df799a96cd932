"""Example: drive the service layer without Flask.

Prints today's doctor and lawyer queues for the configured database.
"""

import importlib

from dotenv import load_dotenv

from config import get_settings_module

from src.dropin_system.dropin_system.container import build_container


def main():
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    for title, rows in (
        ("Doctor", container.attendance_service.doctor_list()),
        ("Lawyer", container.attendance_service.lawyer_list()),
    ):
        print(f"{title} queue ({len(rows)})")
        for r in rows:
            print(f"  {r.formatted_time:>8}  {r.customer_name}")


if __name__ == "__main__":
    main()
