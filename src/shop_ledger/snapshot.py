"""Loading exported store snapshots.

A snapshot is a YAML or JSON file holding the store's collections:

    orders:
      - id: a1
        etsyOrderId: ORD12345
        orderDate: "2024-05-15T10:30:00Z"
        status: Delivered
        orderPrice: 120.50
        ...
    capital:
      - id: c1
        type: Deposit
        source: Etsy Payout
        amount: 1000
        ...
    users:
      - id: u1
        name: Admin User
        email: admin@example.com
        role: admin

This is the only place where raw store values are read. Every date is
normalized here so the aggregation code only ever sees date objects.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, TypeVar

import yaml

from shop_ledger.models.capital import CapitalEntry
from shop_ledger.models.order import Order
from shop_ledger.models.user import User
from shop_ledger.utils.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class SnapshotError(Exception):
    """Raised when a snapshot file cannot be read or has invalid records."""

    pass


@dataclass
class DashboardSnapshot:
    """In-memory copy of the store's collections.

    Attributes:
        orders: All orders, cancelled ones included.
        capital: All capital entries.
        users: All users.
        source: Where the snapshot was loaded from, if anywhere.
    """

    orders: list[Order] = field(default_factory=list)
    capital: list[CapitalEntry] = field(default_factory=list)
    users: list[User] = field(default_factory=list)
    source: Path | None = None


def _parse_collection(
    records: object,
    name: str,
    factory: Callable[[dict[str, object]], T],
) -> list[T]:
    if records is None:
        return []
    if not isinstance(records, list):
        raise SnapshotError(f"'{name}' must be a list, got {type(records).__name__}")

    items: list[T] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise SnapshotError(f"{name}[{index}] must be a mapping, got {type(record).__name__}")
        try:
            items.append(factory(record))
        except KeyError as e:
            raise SnapshotError(f"{name}[{index}] is missing required field {e}") from e
        except ValueError as e:
            raise SnapshotError(f"{name}[{index}]: {e}") from e
    return items


def snapshot_from_dict(data: dict[str, object], source: Path | None = None) -> DashboardSnapshot:
    """Build a snapshot from already-parsed collections.

    Args:
        data: Mapping with optional 'orders', 'capital' and 'users' lists.
        source: Origin of the data, for messages.

    Returns:
        DashboardSnapshot.

    Raises:
        SnapshotError: If a collection or record is malformed.
    """
    snapshot = DashboardSnapshot(
        orders=_parse_collection(data.get("orders"), "orders", Order.from_dict),
        capital=_parse_collection(data.get("capital"), "capital", CapitalEntry.from_dict),
        users=_parse_collection(data.get("users"), "users", User.from_dict),
        source=source,
    )

    undated = sum(1 for order in snapshot.orders if order.order_date is None)
    if undated:
        logger.warning(f"{undated} order(s) have no readable order date")

    logger.info(
        f"Loaded snapshot: {len(snapshot.orders)} orders, "
        f"{len(snapshot.capital)} capital entries, {len(snapshot.users)} users"
    )
    return snapshot


def load_snapshot(path: Path) -> DashboardSnapshot:
    """Load a snapshot file (YAML or JSON).

    Args:
        path: Path to the snapshot file.

    Returns:
        DashboardSnapshot.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        SnapshotError: If the path is not a readable file or not a valid snapshot.
    """
    if not path.exists():
        raise FileNotFoundError(f"Snapshot file not found: {path}")
    if not path.is_file():
        raise SnapshotError(f"Snapshot path is not a file: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (yaml.YAMLError, UnicodeDecodeError, OSError) as e:
        raise SnapshotError(f"Invalid snapshot file {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SnapshotError(f"{path} must contain a mapping, got {type(data).__name__}")

    return snapshot_from_dict(data, source=path)
