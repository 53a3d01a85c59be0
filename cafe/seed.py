"""
Demo data for a fresh database: one profile per role, a small menu and a few
tables. Safe to run more than once.

Profiles are keyed by the auth provider's subject claim, so sign-in tokens
for the demo accounts must carry ``sub`` values matching the ids below.

    python -m cafe.seed
"""
import asyncio
import logging
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.future import select

from .core.logging import configure_logging
from .db.database import AsyncSessionLocal, init_db
from .enums import TableStatus, UserRole
from .models import CafeTable, MenuCategory, MenuItem, User


logger = logging.getLogger(__name__)


DEMO_PROFILES = [
    ("demo-admin", "admin@demo.com", "Demo Admin", UserRole.ADMIN),
    ("demo-staff", "staff@demo.com", "Demo Staff", UserRole.STAFF),
    ("demo-kitchen", "kitchen@demo.com", "Demo Kitchen", UserRole.KITCHEN),
    ("demo-customer", "customer@demo.com", "Demo Customer", UserRole.CUSTOMER),
]

DEMO_MENU = {
    "Coffee": [
        ("Espresso", "2.20"),
        ("Flat White", "3.20"),
        ("Latte", "3.50"),
    ],
    "Bakery": [
        ("Croissant", "2.40"),
        ("Blueberry Muffin", "2.60"),
    ],
    "Lunch": [
        ("Soup of the Day", "5.50"),
        ("Toasted Sandwich", "6.25"),
    ],
}

# (table number, seats)
DEMO_TABLES = [(1, 2), (2, 2), (3, 4), (4, 4), (5, 6)]


async def seed_profiles(db) -> int:
    created = 0
    for user_id, email, full_name, role in DEMO_PROFILES:
        profile = await db.get(User, user_id)
        if profile is None:
            db.add(User(id=user_id, email=email, full_name=full_name, role=role))
            created += 1
        else:
            # demo accounts always end up with their listed role
            profile.email = email
            profile.full_name = full_name
            profile.role = role
    return created


async def seed_menu(db) -> int:
    created = 0
    for position, (category_name, items) in enumerate(DEMO_MENU.items(), start=1):
        category = (await db.execute(
            select(MenuCategory).where(MenuCategory.name == category_name)
        )).scalars().first()

        if category is None:
            category = MenuCategory(name=category_name, sort_order=position)
            db.add(category)
            await db.flush()

        for sort_order, (name, price) in enumerate(items, start=1):
            existing = (await db.execute(
                select(MenuItem).where(MenuItem.category_id == category.id, MenuItem.name == name)
            )).scalars().first()
            if existing is not None:
                continue

            db.add(MenuItem(
                category_id=category.id,
                name=name,
                price=Decimal(price),
                is_available=True,
                sort_order=sort_order,
            ))
            created += 1
    return created


async def seed_tables(db) -> int:
    taken = set((await db.execute(select(CafeTable.table_number))).scalars().all())

    created = 0
    for number, seats in DEMO_TABLES:
        if number in taken:
            continue
        db.add(CafeTable(table_number=number, seats=seats, status=TableStatus.AVAILABLE))
        created += 1
    return created


async def seed_demo_data(session_factory=AsyncSessionLocal) -> dict:
    """
    Write the demo rows that are missing and bring the demo profiles' roles
    back in line.

    Returns:
        Number of rows created per kind.
    """
    async with session_factory() as db:
        try:
            counts = {
                "profiles": await seed_profiles(db),
                "menu_items": await seed_menu(db),
                "tables": await seed_tables(db),
            }
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.exception("Seeding demo data failed")
            raise

    logger.info(
        "Seeded %s profiles, %s menu items, %s tables",
        counts["profiles"], counts["menu_items"], counts["tables"],
    )
    return counts


async def _run() -> None:
    await init_db()
    await seed_demo_data()


def main() -> None:
    configure_logging()
    asyncio.run(_run())


if __name__ == "__main__":
    main()
