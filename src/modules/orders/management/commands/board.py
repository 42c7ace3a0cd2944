from __future__ import annotations

import asyncio
from typing import Any

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from pydantic import ValidationError

from modules.machines.exceptions import MachineConfigError
from modules.machines.services import build_lanes, load_machines
from modules.orders.bootstrap import open_store
from modules.orders.constants import MAIN_LIST, SortKey
from modules.orders.dtos import OrderRecord
from modules.orders.exceptions import InvalidOrderStatus, UnknownStateBackend
from modules.orders.services import OrderStore

COLUMNS = ("ID", "Product", "Qty", "Status", "Location", "Customer", "Delivery")


def _parse_ids(value: str) -> list[int]:
    try:
        return [int(part) for part in value.split(",") if part.strip()]
    except ValueError as exc:
        raise CommandError(f"--ids must be a comma separated list of integers: {value!r}") from exc


class Command(BaseCommand):
    help = "Inspect and edit the order board."

    def add_arguments(self, parser):
        parser.add_argument(
            "--backend",
            choices=["http", "gist", "file", "memory"],
            help="Override ORDER_STATE_BACKEND for this run.",
        )
        actions = parser.add_subparsers(dest="action", required=True)

        for name in ("list", "lanes"):
            sub = actions.add_parser(name)
            sub.add_argument(
                "--sort",
                default=SortKey.MANUAL.value,
                help=f"One of {', '.join(SortKey.values)}.",
            )

        add = actions.add_parser("add")
        add.add_argument("--product", required=True)
        add.add_argument("--quantity", type=int, required=True)
        add.add_argument("--status", required=True)
        add.add_argument("--customer")
        add.add_argument("--delivery-date")

        update = actions.add_parser("update")
        update.add_argument("order_id", type=int)
        update.add_argument("--product")
        update.add_argument("--quantity", type=int)
        update.add_argument("--status")
        update.add_argument("--customer")
        update.add_argument("--delivery-date")

        delete = actions.add_parser("delete")
        delete.add_argument("order_id", type=int)

        move = actions.add_parser("move")
        move.add_argument("order_id", type=int)
        move.add_argument("location")
        move.add_argument("--ids", default="", help="Target lane order after the drop.")

        reorder = actions.add_parser("reorder")
        reorder.add_argument("old_index", type=int)
        reorder.add_argument("new_index", type=int)

        actions.add_parser("machines")

    def handle(self, *args, **options):
        asyncio.run(self._run(options))

    async def _run(self, options: dict[str, Any]) -> None:
        action = options["action"]
        if action == "machines":
            self._print_machines()
            return

        try:
            store = await open_store(options.get("backend"))
        except UnknownStateBackend as exc:
            raise CommandError(str(exc)) from exc

        try:
            handler = getattr(self, f"_{action}")
            await handler(store, options)
        except (ValidationError, InvalidOrderStatus) as exc:
            raise CommandError(str(exc)) from exc

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def _list(self, store: OrderStore, options: dict[str, Any]) -> None:
        self._print_table(store.get_sorted(options["sort"]))

    async def _lanes(self, store: OrderStore, options: dict[str, Any]) -> None:
        machines = self._machines_or_empty()
        names = {machine.id: machine.name for machine in machines}
        lanes = await build_lanes(store, machines, options["sort"])
        for location, orders in lanes.items():
            title = "Main list" if location == MAIN_LIST else names[location]
            self.stdout.write(self.style.MIGRATE_HEADING(f"{title} ({len(orders)})"))
            self._print_table(orders)

    async def _add(self, store: OrderStore, options: dict[str, Any]) -> None:
        order = await store.add(
            {
                "product_name": options["product"],
                "quantity": options["quantity"],
                "status": options["status"],
                "customer_name": options.get("customer"),
                "delivery_date": options.get("delivery_date"),
            }
        )
        self.stdout.write(self.style.SUCCESS(f"Added order #{order.id}."))

    async def _update(self, store: OrderStore, options: dict[str, Any]) -> None:
        existing = self._require(store, options["order_id"])
        changes = {
            "product_name": options.get("product"),
            "quantity": options.get("quantity"),
            "status": options.get("status"),
            "customer_name": options.get("customer"),
            "delivery_date": options.get("delivery_date"),
        }
        payload = existing.model_dump()
        payload.update({key: value for key, value in changes.items() if value is not None})
        await store.update(payload)
        self.stdout.write(self.style.SUCCESS(f"Updated order #{existing.id}."))

    async def _delete(self, store: OrderStore, options: dict[str, Any]) -> None:
        if not await store.delete(options["order_id"]):
            raise CommandError(f"Order #{options['order_id']} not found.")
        self.stdout.write(self.style.SUCCESS(f"Deleted order #{options['order_id']}."))

    async def _move(self, store: OrderStore, options: dict[str, Any]) -> None:
        order_id = options["order_id"]
        ids = _parse_ids(options["ids"])
        if not await store.move_and_reorder(order_id, options["location"], ids):
            raise CommandError(f"Order #{order_id} not found.")
        self.stdout.write(
            self.style.SUCCESS(f"Moved order #{order_id} to {options['location']}.")
        )

    async def _reorder(self, store: OrderStore, options: dict[str, Any]) -> None:
        old_index, new_index = options["old_index"], options["new_index"]
        if not await store.reorder_by_index(old_index, new_index):
            raise CommandError(
                f"Indices must be between 0 and {len(store.get_all()) - 1}."
            )
        self.stdout.write(self.style.SUCCESS(f"Moved position {old_index} to {new_index}."))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _require(store: OrderStore, order_id: int) -> OrderRecord:
        order = store.get(order_id)
        if order is None:
            raise CommandError(f"Order #{order_id} not found.")
        return order

    def _machines_or_empty(self):
        try:
            return load_machines(settings.MACHINES_FILE).machines
        except MachineConfigError as exc:
            self.stderr.write(self.style.WARNING(str(exc)))
            return []

    def _print_machines(self) -> None:
        try:
            machines = load_machines(settings.MACHINES_FILE).machines
        except MachineConfigError as exc:
            raise CommandError(str(exc)) from exc
        for machine in machines:
            self.stdout.write(f"{machine.id}\t{machine.name}")

    def _print_table(self, orders: list[OrderRecord]) -> None:
        if not orders:
            self.stdout.write("<empty>")
            return
        rows = [
            [
                str(order.id),
                order.product_name,
                str(order.quantity),
                order.status,
                order.location,
                order.customer_name or "",
                order.delivery_date or "",
            ]
            for order in orders
        ]
        widths = [len(column) for column in COLUMNS]
        for row in rows:
            for index, cell in enumerate(row):
                widths[index] = max(widths[index], len(cell))

        def fmt(cells) -> str:
            return " | ".join(cell.ljust(widths[i]) for i, cell in enumerate(cells)).rstrip()

        self.stdout.write(fmt(COLUMNS))
        self.stdout.write("-+-".join("-" * width for width in widths))
        for row in rows:
            self.stdout.write(fmt(row))
