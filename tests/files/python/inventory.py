"""Inventory helpers."""

import os
from dataclasses import dataclass, field

DEFAULT_LOCATION = os.getenv("INVENTORY_LOCATION", "main")


@dataclass
class Item:
    name: str
    quantity: int = 0


class Inventory:
    def __init__(self):
        self.items = []

    def add(self, item: Item) -> None:
        self.items.append(item)


def total_quantity(items: list[Item]) -> int:
    return sum(i.quantity for i in items)


async def refresh(inventory: Inventory):
    return inventory
