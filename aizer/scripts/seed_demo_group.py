"""
Seed Demo Group Script
Creates a small demo hierarchy for an existing user:
group "Demo home" -> space "Garage" -> inventory "Shelf A" -> item "Drill".
Uses the service role key, so it bypasses row-level security.

Usage: python -m aizer.scripts.seed_demo_group owner@example.com
"""

import sys
import logging

from aizer.core.exceptions import AizerError, NotFoundError
from aizer.database.store import Store, first_or_none, raise_for_error
from aizer.database.supabase_client import SupabaseClient
from aizer.modules.groups.schemas import GroupCreate
from aizer.modules.groups.service import GroupService
from aizer.modules.hierarchy.holder import SnapshotHolder
from aizer.modules.hierarchy.service import load_group_snapshot, snapshot_totals
from aizer.modules.inventories.schemas import InventoryCreate
from aizer.modules.inventories.service import InventoryService
from aizer.modules.items.schemas import ItemCreate
from aizer.modules.items.service import ItemService
from aizer.modules.spaces.schemas import SpaceCreate
from aizer.modules.spaces.service import SpaceService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def seed_demo_group(store: Store, owner_email: str) -> str:
    """Create the demo hierarchy and return the new group id"""
    profile = first_or_none(raise_for_error(
        store.query("profiles", [("email", owner_email.strip().lower())], columns="id"),
        "look up owner",
    ))
    if not profile:
        raise NotFoundError(f"No user registered with email {owner_email}")

    group = GroupService(store).create_group(
        GroupCreate(name="Demo home", description="Seeded demo data"), profile["id"]
    )
    holder = SnapshotHolder(lambda group_id: load_group_snapshot(store, group_id))
    holder.load(group.id)
    try:
        garage = SpaceService(store).create_space(SpaceCreate(group_id=group.id, name="Garage"))
        holder.reload()
        shelf = InventoryService(store).create_inventory(
            InventoryCreate(group_id=group.id, name="Shelf A", parent_space_id=garage.id)
        )
        holder.reload()
        ItemService(store).create_item(ItemCreate(
            group_id=group.id, name="Drill", quantity=1, price=89.9, color="green", inventory_id=shelf.id,
        ))
        totals = snapshot_totals(holder.reload())
    finally:
        holder.close()
    logger.info(
        "Seeded demo group %s for %s: %d spaces, %d inventories, %d items",
        group.id, owner_email, totals.spaces, totals.inventories, totals.items,
    )
    return group.id



def main():
    if len(sys.argv) != 2:
        print("Usage: python -m aizer.scripts.seed_demo_group <owner-email>")
        sys.exit(2)
    try:
        seed_demo_group(Store(SupabaseClient.get_service_client()), sys.argv[1])
    except AizerError as e:
        logger.error("Error during seeding: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
