# Demo data settings

DEMO_OWNER = {
    "id": "demo-owner-uid",
    "email": "demo-owner@barbersbuddies.com",
    "display_name": "Demo Shop Owner",
    "user_type": "shop-owner",
    "phone_number": "+4915123456789",
    "language": "en",
}

DEMO_CUSTOMER = {
    "id": "demo-customer-uid",
    "email": "demo-customer@barbersbuddies.com",
    "display_name": "Demo Customer",
    "user_type": "customer",
    "phone_number": "+4915198765432",
    "language": "en",
}

DEMO_SHOP_ID = "demo-shop-id"

COUNTS = {
    "shop_owners": 11,
    "customers": 50,
    "demo_shop_bookings": 50,
    "bookings_per_shop": (10, 30),
    "employees_per_shop": (2, 5),
    "services_per_shop": (5, 10),
    "messages_per_conversation": (3, 8),
    "demo_customer_shops": 5,
    "conversations_for_demo_shop": 20,
    "notifications_for_demo_shop": 50,
}

# Share of completed bookings that get a review, in percent
RATING_PERCENTAGE = 70

# Booking status weights by where the date falls relative to today
STATUS_WEIGHTS = {
    "past": {"completed": 70, "cancelled": 20, "rescheduled": 10},
    "today": {"confirmed": 60, "pending": 30, "completed": 10},
    "future": {"confirmed": 50, "pending": 40, "cancelled": 10},
}

# Star rating weights, skewed positive
SCORE_WEIGHTS = {5: 45, 4: 30, 3: 15, 2: 7, 1: 3}

LANGUAGES = ("en", "de", "tr")

BATCH_SIZE = 400
