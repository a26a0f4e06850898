"""Example: drive the service layer directly, without Flask.

Controllers stay thin; the use cases live in the services.
"""

from src.labnexus.labnexus.container import build_client_backend, build_container
from src.labnexus.labnexus.main import load_settings


def main():
    settings = load_settings()
    container = build_container(backend=build_client_backend(settings))
    container.system_service.initialize()

    stats = container.equipment_service.dashboard_stats()
    print(f"{stats.total} items, {stats.operational} operational, {stats.maintenance_due} due")
    for note in container.notification_service.feed(limit=5):
        print(f"[{note.type.value}] {note.title}: {note.message}")


if __name__ == "__main__":
    main()
