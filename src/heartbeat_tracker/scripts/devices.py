# src/heartbeat_tracker/scripts/devices.py
"""Register devices and inspect their beat counters.

Usage:
    python -m heartbeat_tracker.scripts.devices add "my phone"
    python -m heartbeat_tracker.scripts.devices list
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from sqlalchemy.orm import Session

from heartbeat_tracker.core.errors import StorageError
from heartbeat_tracker.core.security import generate_token
from heartbeat_tracker.db.session import SessionLocal, create_tables, unit_of_work
from heartbeat_tracker.models import Device
from heartbeat_tracker.repositories.devices import DeviceStore


def add_device(db: Session, name: str, token: str | None = None) -> Device:
    """Register a device, generating a token unless one is supplied."""
    with unit_of_work(db):
        device = DeviceStore(db).create(name=name, token=token or generate_token())
    return device


def list_devices(db: Session) -> list[Device]:
    """Return every registered device."""
    return DeviceStore(db).list_all()


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Manage devices allowed to send beats")
    subparsers = parser.add_subparsers(dest="command", required=True)

    add = subparsers.add_parser("add", help="Register a new device and print its token")
    add.add_argument("name", help="Human readable device name")
    add.add_argument("--token", default=None, help="Use this token instead of a generated one")

    subparsers.add_parser("list", help="List devices and their beat counts")

    args = parser.parse_args(argv)

    create_tables()
    with SessionLocal() as db:
        if args.command == "add":
            try:
                device = add_device(db, args.name, args.token)
            except StorageError as exc:
                print(f"[devices] ERROR: {exc}", file=sys.stderr)
                sys.exit(1)
            print(f"[devices] registered {device.name!r} (id={device.id})")
            print(device.token)
        else:
            for device in list_devices(db):
                print(f"{device.id}\t{device.name}\t{device.beat_count} beats")


if __name__ == "__main__":
    main()
