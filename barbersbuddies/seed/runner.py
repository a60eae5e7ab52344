"""
Demo data seed.

Writes users, shops, bookings, ratings, messages, notifications and
reminder preferences for a demo environment. Triggers are switched off for
the bulk write, so the shop-name index and the rating aggregates are written
here directly.
"""

from sqlalchemy import delete, select

from ..models import (
    Booking,
    DeletedAccount,
    Message,
    Notification,
    NotificationLog,
    NotificationPreference,
    OutboxEvent,
    Rating,
    Shop,
    ShopName,
    User,
)
from ..triggers import name_search_key, triggers_suspended
from . import config, generators
from .random_data import make_rng

# Tables removed by ``clean_demo_data``, children first
SEEDED_TABLES = (
    NotificationLog,
    Notification,
    Message,
    Rating,
    Booking,
    ShopName,
    Shop,
    NotificationPreference,
    DeletedAccount,
    OutboxEvent,
    User,
)


def batch_write(session, label, records, batch_size=config.BATCH_SIZE):
    for start in range(0, len(records), batch_size):
        session.add_all(records[start:start + batch_size])
        session.flush()
    print(f"   ✓ {len(records)} records written to {label}")
    return len(records)


def shop_name_entry(shop):
    return ShopName(
        id=shop.id,
        name=shop.name,
        name_search=name_search_key(shop.name),
        created_at=shop.created_at,
    )


def seed_demo_data(session, rng=None):
    """Generate and store the demo data set. Returns a count per record type."""
    rng = rng or make_rng()
    summary = {}

    with triggers_suspended(session):
        print("👤 Creating users...")
        demo_users = generators.demo_users(rng)
        owners = generators.shop_owners(rng)
        customer_users = generators.customers(rng)
        summary["users"] = batch_write(session, "users", demo_users + owners + customer_users)

        print("🏪 Creating barbershops...")
        shops = generators.all_shops(rng, [owner.id for owner in owners])
        summary["shops"] = batch_write(session, "barber_shops", shops)
        batch_write(session, "shop_names", [shop_name_entry(shop) for shop in shops])

        print("📅 Creating bookings...")
        demo_customer = demo_users[1]
        customer_pool = customer_users + [demo_customer]
        bookings = []
        low, high = config.COUNTS["bookings_per_shop"]
        for shop in shops:
            count = (
                config.COUNTS["demo_shop_bookings"]
                if shop.id == config.DEMO_SHOP_ID
                else rng.randint(low, high)
            )
            bookings.extend(generators.shop_bookings(rng, shop, customer_pool, count))
        bookings.extend(generators.demo_customer_bookings(rng, shops, demo_customer))

        print("⭐ Creating ratings...")
        ratings = []
        ratings_by_shop = {}
        for shop in shops:
            completed = [b for b in bookings if b.shop_id == shop.id and b.status == "completed"]
            shop_ratings = generators.shop_ratings(rng, completed)
            ratings_by_shop[shop.id] = shop_ratings
            ratings.extend(shop_ratings)
            for field, value in generators.rating_aggregates(shop_ratings).items():
                setattr(shop, field, value)

        summary["bookings"] = batch_write(session, "bookings", bookings)
        summary["ratings"] = batch_write(session, "ratings", ratings)

        print("💬 Creating message threads...")
        demo_shop = next(shop for shop in shops if shop.id == config.DEMO_SHOP_ID)
        demo_bookings = [b for b in bookings if b.shop_id == config.DEMO_SHOP_ID]
        messages = generators.demo_shop_conversations(rng, demo_bookings, demo_shop)
        summary["messages"] = batch_write(session, "messages", messages)

        print("🔔 Creating notifications...")
        notifications = generators.shop_notifications(
            rng, demo_bookings, demo_shop, ratings_by_shop[config.DEMO_SHOP_ID]
        )[: config.COUNTS["notifications_for_demo_shop"]]
        summary["notifications"] = batch_write(session, "notifications", notifications)

        print("⚙️ Creating notification preferences...")
        batch_write(
            session,
            "notification_preferences",
            generators.notification_preferences(demo_users),
        )

        session.commit()

    print("=" * 50)
    print("✅ SEED COMPLETE!")
    print("=" * 50)
    for label, count in summary.items():
        print(f"   • {label.title()}: {count}")
    print(f"   Shop owner: {config.DEMO_OWNER['email']}")
    print(f"   Customer:   {config.DEMO_CUSTOMER['email']}")
    return summary


def clean_demo_data(session):
    """Delete every seeded table. Returns the number of rows removed per table."""
    removed = {}
    with triggers_suspended(session):
        for model in SEEDED_TABLES:
            result = session.execute(delete(model))
            removed[model.__tablename__] = result.rowcount
        session.commit()
    print(f"🧹 Removed {sum(removed.values())} records")
    return removed


def rebuild_shop_names(session, batch_size=config.BATCH_SIZE):
    """Rewrite the shop-name index from the shops table, committing in batches."""
    count = 0
    shops = session.scalars(select(Shop).order_by(Shop.created_at)).all()
    with triggers_suspended(session):
        for shop in shops:
            entry = session.get(ShopName, shop.id)
            if entry is None:
                session.add(shop_name_entry(shop))
            else:
                entry.name = shop.name
                entry.name_search = name_search_key(shop.name)
            count += 1
            if count % batch_size == 0:
                session.commit()
                print(f"Processed {count} shops...")
        session.commit()
    print(f"Migration completed! Processed {count} shops total.")
    return count
