"""
Demo record generators.

Each generator returns unsaved model instances; ``runner`` decides when and
how they are written.
"""

from datetime import datetime

from ..models import Booking, Message, Notification, NotificationPreference, Rating, Shop, User
from ..utils.validators import compute_total_price
from . import config
from .dates import random_date, random_time_slot, timestamp, today
from .random_data import (
    name_to_email,
    random_id,
    random_name,
    random_phone,
    random_subset,
    weighted_choice,
)

# Users


def demo_users(rng):
    return [
        User(**config.DEMO_OWNER, created_at=timestamp(rng, -30)),
        User(**config.DEMO_CUSTOMER, created_at=timestamp(rng, -20)),
    ]


def shop_owners(rng, count=config.COUNTS["shop_owners"]):
    owners = []
    for i in range(count):
        name = random_name(rng)
        owners.append(
            User(
                id=f"shop-owner-{i + 1}-uid",
                email=name_to_email(rng, name),
                display_name=name,
                user_type="shop-owner",
                phone_number=random_phone(rng),
                language=config.LANGUAGES[i % len(config.LANGUAGES)],
                created_at=timestamp(rng, -60 + i * 3),
            )
        )
    return owners


def customers(rng, count=config.COUNTS["customers"]):
    result = []
    for i in range(count):
        name = random_name(rng)
        result.append(
            User(
                id=f"customer-{i + 1}-uid",
                email=name_to_email(rng, name),
                display_name=name,
                user_type="customer",
                phone_number=random_phone(rng),
                language=config.LANGUAGES[i % len(config.LANGUAGES)],
                created_at=timestamp(rng, -90 + i),
            )
        )
    return result


# Services and employees

SERVICE_CATALOG = [
    {"name": "Classic Haircut", "price": 25, "duration": 30, "category": "haircut"},
    {"name": "Buzz Cut", "price": 15, "duration": 15, "category": "haircut"},
    {"name": "Fade Haircut", "price": 30, "duration": 35, "category": "haircut"},
    {"name": "Skin Fade", "price": 35, "duration": 40, "category": "haircut"},
    {"name": "Scissor Cut", "price": 35, "duration": 45, "category": "haircut"},
    {"name": "Textured Crop", "price": 30, "duration": 35, "category": "haircut"},
    {"name": "Beard Trim", "price": 15, "duration": 20, "category": "beard"},
    {"name": "Beard Shaping", "price": 20, "duration": 25, "category": "beard"},
    {"name": "Full Beard Grooming", "price": 30, "duration": 35, "category": "beard"},
    {"name": "Hot Towel Shave", "price": 35, "duration": 40, "category": "shave"},
    {"name": "Head Shave", "price": 25, "duration": 30, "category": "shave"},
    {"name": "Neck Shave", "price": 10, "duration": 10, "category": "shave"},
    {"name": "Haircut + Beard", "price": 40, "duration": 50, "category": "combo"},
    {"name": "Haircut + Hot Towel Shave", "price": 55, "duration": 70, "category": "combo"},
    {"name": "The Works", "price": 75, "duration": 90, "category": "combo"},
    {"name": "Kids Haircut (Under 12)", "price": 18, "duration": 25, "category": "kids"},
    {"name": "Teen Haircut", "price": 22, "duration": 30, "category": "kids"},
    {"name": "Hair Styling", "price": 15, "duration": 20, "category": "styling"},
    {"name": "Special Occasion Style", "price": 40, "duration": 45, "category": "styling"},
    {"name": "Scalp Treatment", "price": 25, "duration": 30, "category": "treatment"},
    {"name": "Hair Coloring", "price": 50, "duration": 60, "category": "coloring"},
    {"name": "Grey Blending", "price": 35, "duration": 30, "category": "coloring"},
]

CORE_CATEGORIES = ("haircut", "beard", "combo")
PRICE_MULTIPLIERS = {"€": 0.8, "€€": 1.0, "€€€": 1.3}


def shop_services(rng, count=8, multiplier=1.0):
    """One service from each core category, the rest drawn from the others."""
    core = [
        next(service for service in SERVICE_CATALOG if service["category"] == category)
        for category in CORE_CATEGORIES
    ]
    others = [s for s in SERVICE_CATALOG if s["category"] not in CORE_CATEGORIES]
    extra = random_subset(rng, others, max(0, count - len(core)))
    return [
        {
            "id": random_id(rng, 10),
            "name": service["name"],
            "price": round(service["price"] * multiplier),
            "duration": service["duration"],
        }
        for service in core + extra
    ]


SPECIALTIES = [
    "Master Barber",
    "Senior Stylist",
    "Barber",
    "Junior Barber",
    "Beard Specialist",
    "Color Specialist",
]

DEMO_EMPLOYEES = [
    {"id": "emp-demo-1", "name": "Marcus Johnson", "role": "Master Barber", "yearsExperience": 12},
    {"id": "emp-demo-2", "name": "Carlos Rodriguez", "role": "Senior Stylist", "yearsExperience": 8},
    {"id": "emp-demo-3", "name": "Ahmed Hassan", "role": "Beard Specialist", "yearsExperience": 6},
    {"id": "emp-demo-4", "name": "Tyler Williams", "role": "Barber", "yearsExperience": 4},
]


def employees(rng, count=3):
    result = []
    for i in range(count):
        name = random_name(rng)
        result.append(
            {
                "id": random_id(rng, 10),
                "name": name,
                "email": name_to_email(rng, name),
                "role": SPECIALTIES[i % len(SPECIALTIES)],
                "yearsExperience": rng.randint(1, 15),
                "isActive": True,
            }
        )
    return result


def demo_employees():
    return [
        dict(
            employee,
            email=f"{employee['name'].split()[0].lower()}@demobarbershop.com",
            isActive=True,
        )
        for employee in DEMO_EMPLOYEES
    ]


# Shops

SHOP_TEMPLATES = [
    {
        "name": "Demo Barbershop",
        "unique_url": "demo-barbershop",
        "address": "123 Main Street, Berlin, 10115",
        "biography": "Welcome to Demo Barbershop, your premier destination for classic cuts and modern styles.",
        "categories": ["Barbershop", "Classic"],
        "pricing_tier": "€€",
        "is_demo": True,
    },
    {
        "name": "Urban Cuts Studio",
        "unique_url": "urban-cuts-studio",
        "address": "45 Fashion Avenue, Munich, 80331",
        "biography": "Urban Cuts brings the latest trends from the streets to your style.",
        "categories": ["Barbershop", "Modern"],
        "pricing_tier": "€€€",
    },
    {
        "name": "The Gentleman's Corner",
        "unique_url": "gentlemans-corner",
        "address": "78 Oak Lane, Hamburg, 20095",
        "biography": "A traditional barbershop experience with a modern twist.",
        "categories": ["Barbershop", "Classic", "Luxury"],
        "pricing_tier": "€€€",
    },
    {
        "name": "Fresh Fades Barbers",
        "unique_url": "fresh-fades-barbers",
        "address": "22 Park Road, Frankfurt, 60311",
        "biography": "Home of the freshest fades in town.",
        "categories": ["Barbershop", "Modern"],
        "pricing_tier": "€€",
    },
    {
        "name": "Classic Clips",
        "unique_url": "classic-clips",
        "address": "99 Heritage Street, Cologne, 50667",
        "biography": "No frills, just quality cuts at honest prices.",
        "categories": ["Barbershop", "Budget-Friendly"],
        "pricing_tier": "€",
    },
    {
        "name": "Blade & Brush",
        "unique_url": "blade-and-brush",
        "address": "156 Arts District, Dusseldorf, 40213",
        "biography": "Where artistry meets grooming.",
        "categories": ["Barbershop", "Creative"],
        "pricing_tier": "€€€",
    },
    {
        "name": "The Shave Lab",
        "unique_url": "the-shave-lab",
        "address": "33 Science Park, Stuttgart, 70173",
        "biography": "Precision grooming with premium products.",
        "categories": ["Barbershop", "Shave Specialist"],
        "pricing_tier": "€€",
    },
    {
        "name": "Kings Crown Barbers",
        "unique_url": "kings-crown-barbers",
        "address": "88 Royal Mile, Leipzig, 04109",
        "biography": "Premium services and impeccable attention to detail.",
        "categories": ["Barbershop", "Luxury"],
        "pricing_tier": "€€€",
    },
    {
        "name": "Quick Cuts Express",
        "unique_url": "quick-cuts-express",
        "address": "12 Station Road, Dresden, 01067",
        "biography": "Quality cuts, quick service, great prices.",
        "categories": ["Barbershop", "Express"],
        "pricing_tier": "€",
    },
    {
        "name": "Beard Brothers",
        "unique_url": "beard-brothers",
        "address": "67 Hipster Lane, Nuremberg, 90402",
        "biography": "The beard experts, from grooming to sculpting.",
        "categories": ["Barbershop", "Beard Specialist"],
        "pricing_tier": "€€",
    },
    {
        "name": "Fade Factory",
        "unique_url": "fade-factory",
        "address": "44 Trend Street, Hannover, 30159",
        "biography": "Our barbers are trained in every fade variation imaginable.",
        "categories": ["Barbershop", "Fade Specialist"],
        "pricing_tier": "€€",
    },
    {
        "name": "Old School Barber Co",
        "unique_url": "old-school-barber-co",
        "address": "200 Vintage Avenue, Bremen, 28195",
        "biography": "Classic service, timeless style.",
        "categories": ["Barbershop", "Classic", "Vintage"],
        "pricing_tier": "€€",
    },
]

DEFAULT_AVAILABILITY = {
    "Monday": {"open": "09:00", "close": "18:00"},
    "Tuesday": {"open": "09:00", "close": "18:00"},
    "Wednesday": {"open": "09:00", "close": "18:00"},
    "Thursday": {"open": "09:00", "close": "20:00"},
    "Friday": {"open": "09:00", "close": "20:00"},
    "Saturday": {"open": "10:00", "close": "16:00"},
    "Sunday": None,
}


def shop(rng, template, index, owner_id):
    is_demo = template.get("is_demo", False)
    multiplier = PRICE_MULTIPLIERS.get(template["pricing_tier"], 1.0)
    low, high = config.COUNTS["services_per_shop"]
    service_count = high if is_demo else rng.randint(low, high)
    low, high = config.COUNTS["employees_per_shop"]
    staff = demo_employees() if is_demo else employees(rng, rng.randint(low, high))

    return Shop(
        id=config.DEMO_SHOP_ID if is_demo else random_id(rng),
        owner_id=owner_id,
        name=template["name"],
        unique_url=template["unique_url"],
        address=template["address"],
        email=f"contact@{template['unique_url'].replace('-', '')}.com",
        phone_number=f"+49{1500000000 + index * 1111111}",
        biography=template["biography"],
        categories=list(template["categories"]),
        services=shop_services(rng, service_count, multiplier),
        employees=staff,
        availability=dict(DEFAULT_AVAILABILITY),
        ratings=[],
        average_rating=0,
        total_ratings=0,
        rating_distribution={str(score): 0 for score in range(1, 6)},
        rating_ids=[],
        last_rated_at=None,
        created_at=timestamp(rng, -90 + index * 5),
    )


def all_shops(rng, owner_ids):
    """The demo shop belongs to the demo owner, the rest to ``owner_ids`` in order."""
    return [
        shop(rng, template, index, config.DEMO_OWNER["id"] if index == 0 else owner_ids[index - 1])
        for index, template in enumerate(SHOP_TEMPLATES)
    ]


# Bookings

CANCELLATION_REASONS = [
    "Schedule conflict",
    "Feeling unwell",
    "Emergency came up",
    "Need to reschedule",
    "Changed my mind",
]


def _booking_services(rng, shop_services_list, max_count):
    chosen = random_subset(rng, shop_services_list, rng.randint(1, max_count))
    return [
        {"name": s["name"], "price": s["price"], "duration": s["duration"]} for s in chosen
    ]


def status_for_date(rng, selected_date, today_string):
    if selected_date < today_string:
        return weighted_choice(rng, config.STATUS_WEIGHTS["past"])
    if selected_date == today_string:
        return weighted_choice(rng, config.STATUS_WEIGHTS["today"])
    return weighted_choice(rng, config.STATUS_WEIGHTS["future"])


def _new_booking(rng, shop_record, customer, selected_date, status, services, created_offset):
    staff = rng.choice(shop_record.employees)
    booking = Booking(
        id=random_id(rng),
        shop_id=shop_record.id,
        shop_email=shop_record.email,
        user_name=customer.display_name,
        user_email=customer.email.lower(),
        user_phone=customer.phone_number,
        selected_date=selected_date,
        selected_time=random_time_slot(rng, "09:00", "17:00"),
        selected_services=services,
        custom_service="",
        total_price=compute_total_price(services),
        notes="",
        employee_id=staff["id"],
        employee_name=staff["name"],
        status=status,
        created_at=timestamp(rng, created_offset),
        last_modified=timestamp(rng, min(created_offset + 1, 0)),
        is_rated=False,
        rating=0,
        review="",
    )
    return booking


def shop_bookings(rng, shop_record, customer_pool, count=20):
    """Bookings spread 60% past, 30% future, 10% today, status by date."""
    today_string = today().isoformat()
    bookings = []
    for _ in range(count):
        roll = rng.random()
        if roll < 0.6:
            selected_date = random_date(rng, -5, -1)
        elif roll < 0.9:
            selected_date = random_date(rng, 1, 7)
        else:
            selected_date = today_string

        status = status_for_date(rng, selected_date, today_string)
        created_offset = rng.randint(-10, -1) if selected_date < today_string else rng.randint(-7, -1)
        booking = _new_booking(
            rng,
            shop_record,
            rng.choice(customer_pool),
            selected_date,
            status,
            _booking_services(rng, shop_record.services, 3),
            created_offset,
        )

        if status == "cancelled":
            booking.cancellation_reason = rng.choice(CANCELLATION_REASONS)
            booking.cancelled_at = timestamp(rng, created_offset + 1)
            booking.cancelled_by = "shop" if rng.random() > 0.7 else "customer"
        elif status == "rescheduled":
            booking.previous_date = random_date(rng, -10, -6)
            booking.previous_time = random_time_slot(rng, "09:00", "17:00")
            booking.rescheduled_at = timestamp(rng, created_offset + 1)
            booking.rescheduled_by = "customer"
            booking.rescheduling_reason = "Time conflict"

        bookings.append(booking)
    return bookings


DEMO_CUSTOMER_STATUSES = ("completed", "confirmed", "pending", "cancelled")


def demo_customer_bookings(rng, shops, demo_customer):
    bookings = []
    chosen = random_subset(rng, shops, config.COUNTS["demo_customer_shops"])
    for shop_index, shop_record in enumerate(chosen):
        booking_count = 5 if shop_index == 0 else rng.randint(2, 3)
        for i in range(booking_count):
            status = DEMO_CUSTOMER_STATUSES[i % len(DEMO_CUSTOMER_STATUSES)]
            if status in ("completed", "cancelled"):
                selected_date = random_date(rng, -5, -1)
            else:
                selected_date = random_date(rng, 1, 7)
            booking = _new_booking(
                rng,
                shop_record,
                demo_customer,
                selected_date,
                status,
                _booking_services(rng, shop_record.services, 2),
                -10 + i,
            )
            if status == "cancelled":
                booking.cancellation_reason = "Schedule conflict"
                booking.cancelled_at = timestamp(rng, -4)
                booking.cancelled_by = "customer"
            bookings.append(booking)
    return bookings


# Ratings

REVIEW_TEMPLATES = {
    5: [
        "Absolutely amazing experience! Best haircut I've ever had.",
        "Outstanding service from start to finish. Will definitely be back!",
        "The staff is incredibly skilled and friendly. Highly recommend!",
        "Perfect fade every time. These guys are true professionals.",
        "Clean shop, great atmosphere, and an even better haircut.",
    ],
    4: [
        "Great haircut, very satisfied with the result.",
        "Good experience overall. Minor wait time but worth it.",
        "Professional service and quality cut. Would recommend.",
        "Solid barbershop with consistent quality. Will return.",
    ],
    3: [
        "Decent haircut, but the wait was longer than expected.",
        "Average experience. The cut was okay but nothing special.",
        "Good service but a bit pricey for what you get.",
    ],
    2: [
        "Not what I asked for. Disappointed with the result.",
        "Long wait and mediocre cut. Expected better.",
        "Overpriced for the quality. Won't be returning.",
    ],
    1: [
        "Very disappointing experience. Would not recommend.",
        "Terrible service. Had to fix it elsewhere.",
    ],
}

RESPONSE_TEMPLATES = [
    "Thank you so much for your kind words! We're thrilled you enjoyed your experience.",
    "We really appreciate your feedback! Looking forward to seeing you again soon.",
    "Thanks for taking the time to leave a review! Your satisfaction is our priority.",
    "Thank you for your support! Our team works hard to deliver the best service.",
]


def rating_for(rng, booking):
    score = weighted_choice(rng, config.SCORE_WEIGHTS)
    created = timestamp(rng, rng.randint(-5, -1))
    rating = Rating(
        id=random_id(rng),
        shop_id=booking.shop_id,
        booking_id=booking.id,
        user_id=booking.user_email,
        user_name=booking.user_name,
        rating=score,
        review=rng.choice(REVIEW_TEMPLATES[score]),
        created_at=created,
    )
    # Owners answer about half of the good reviews
    if score >= 4 and rng.random() > 0.5:
        rating.shop_response = {
            "content": rng.choice(RESPONSE_TEMPLATES),
            "timestamp": timestamp(rng, rng.randint(-3, 0)).isoformat(),
        }
    return rating


def shop_ratings(rng, completed_bookings, percentage=config.RATING_PERCENTAGE):
    """Rate a share of completed bookings and link each rating back to its booking."""
    ratings = []
    for booking in completed_bookings:
        if rng.random() * 100 >= percentage:
            continue
        rating = rating_for(rng, booking)
        booking.is_rated = True
        booking.rating = rating.rating
        booking.review = rating.review
        booking.rating_id = rating.id
        booking.rating_submitted_at = rating.created_at
        ratings.append(rating)
    return ratings


def rating_aggregates(ratings):
    """Shop aggregate fields for a full list of ratings."""
    distribution = {str(score): 0 for score in range(1, 6)}
    if not ratings:
        return {
            "ratings": [],
            "average_rating": 0,
            "total_ratings": 0,
            "rating_distribution": distribution,
            "rating_ids": [],
            "last_rated_at": None,
        }
    scores = [rating.rating for rating in ratings]
    for score in scores:
        distribution[str(score)] += 1
    return {
        "ratings": scores,
        "average_rating": round(sum(scores) / len(scores), 1),
        "total_ratings": len(scores),
        "rating_distribution": distribution,
        "rating_ids": [rating.id for rating in ratings],
        "last_rated_at": ratings[-1].created_at,
    }


# Messages

CUSTOMER_MESSAGES = {
    "inquiry": [
        "Hi, I'd like to confirm my appointment for tomorrow.",
        "What time slots do you have available this week?",
        "Can I reschedule my appointment to a later time?",
        "Do you offer beard grooming services?",
        "Is parking available near your shop?",
    ],
    "confirmation": [
        "Perfect, I'll see you then!",
        "Great, thanks for confirming!",
        "That works for me, thank you!",
    ],
    "thanks": ["Thank you so much!", "Really appreciate it!", "Thanks for your help!"],
}

SHOP_MESSAGES = {
    "response": [
        "Hello! Yes, your appointment is confirmed for tomorrow at the scheduled time.",
        "Hi there! We have several slots available. What time works best for you?",
        "Of course! We can reschedule you. What time would you prefer?",
        "Yes, we offer full beard grooming services. Would you like to add that?",
    ],
    "closing": [
        "See you soon!",
        "Looking forward to seeing you!",
        "Let us know if you have any other questions!",
    ],
}


def _thread_content(rng, i, count):
    if i % 2 == 0:
        if i == 0:
            return rng.choice(CUSTOMER_MESSAGES["inquiry"])
        if i == count - 1:
            return rng.choice(CUSTOMER_MESSAGES["thanks"])
        return rng.choice(CUSTOMER_MESSAGES["confirmation"])
    if i == 1:
        return rng.choice(SHOP_MESSAGES["response"])
    return rng.choice(SHOP_MESSAGES["closing"])


def conversation(rng, booking, shop_record, count=4):
    """Alternating customer/shop thread; the last message stays unread."""
    start = -rng.randint(1, 5)
    details = {
        "date": booking.selected_date,
        "time": booking.selected_time,
        "services": booking.selected_services,
        "totalPrice": float(booking.total_price),
    }
    messages = []
    for i in range(count):
        from_customer = i % 2 == 0
        messages.append(
            Message(
                id=random_id(rng),
                booking_id=booking.id,
                shop_id=shop_record.id,
                customer_id=booking.user_email,
                customer_name=booking.user_name,
                shop_name=shop_record.name,
                content=_thread_content(rng, i, count),
                sender_id=booking.user_email if from_customer else shop_record.owner_id,
                sender_type="customer" if from_customer else "shop",
                receiver_id=shop_record.owner_id if from_customer else booking.user_email,
                appointment_details=details,
                timestamp=timestamp(rng, start + i * 0.1),
                read=i < count - 1,
            )
        )
    return messages


def demo_shop_conversations(rng, bookings, shop_record):
    messages = []
    low, high = config.COUNTS["messages_per_conversation"]
    for booking in bookings[: config.COUNTS["conversations_for_demo_shop"]]:
        messages.extend(conversation(rng, booking, shop_record, rng.randint(low, high)))
    return messages


# Notifications

NOTIFICATION_TITLES = {
    "new_booking": "New Booking",
    "reschedule": "Appointment Rescheduled",
    "status_update": "Booking Status Updated",
    "new_message": "New Message",
    "rating_response": "New Review",
}


def _notification(rng, kind, text, shop_record, booking_id=None, rating_id=None, days_ago=None):
    if days_ago is None:
        days_ago = -rng.randint(0, 5)
    return Notification(
        id=random_id(rng),
        user_id=shop_record.owner_id,
        shop_id=shop_record.id,
        booking_id=booking_id,
        rating_id=rating_id,
        type=kind,
        title=NOTIFICATION_TITLES[kind],
        message=text,
        read=rng.random() > 0.3,
        created_at=timestamp(rng, days_ago),
    )


def shop_notifications(rng, bookings, shop_record, ratings=()):
    """Owner inbox for the demo shop, newest first."""
    notifications = []
    for booking in bookings:
        notifications.append(
            _notification(
                rng,
                "new_booking",
                f"{booking.user_name} booked an appointment for "
                f"{booking.selected_date} at {booking.selected_time}",
                shop_record,
                booking_id=booking.id,
                days_ago=-rng.randint(1, 5),
            )
        )
        if booking.status == "cancelled" and rng.random() > 0.5:
            notifications.append(
                _notification(
                    rng,
                    "status_update",
                    f"Booking for {booking.user_name} has been cancelled",
                    shop_record,
                    booking_id=booking.id,
                    days_ago=-rng.randint(0, 3),
                )
            )
        if booking.status == "rescheduled":
            notifications.append(
                _notification(
                    rng,
                    "reschedule",
                    f"{booking.user_name} rescheduled their appointment to "
                    f"{booking.selected_date} at {booking.selected_time}",
                    shop_record,
                    booking_id=booking.id,
                    days_ago=-rng.randint(0, 3),
                )
            )

    for rating in ratings:
        if rng.random() > 0.3:
            notifications.append(
                _notification(
                    rng,
                    "rating_response",
                    f"{rating.user_name} left a {rating.rating}-star review",
                    shop_record,
                    booking_id=rating.booking_id,
                    rating_id=rating.id,
                    days_ago=-rng.randint(0, 4),
                )
            )

    if bookings:
        for _ in range(rng.randint(5, 15)):
            booking = rng.choice(bookings)
            notifications.append(
                _notification(
                    rng,
                    "new_message",
                    f"You have a new message from {booking.user_name}",
                    shop_record,
                    booking_id=booking.id,
                )
            )

    notifications.sort(key=lambda n: n.created_at, reverse=True)
    return notifications


def notification_preferences(users):
    return [
        NotificationPreference(
            user_email=user.email,
            enabled=True,
            one_hour_before=True,
            one_day_before=True,
            three_days_before=False,
            one_week_before=False,
            on_booking=True,
            updated_at=datetime.now(),
        )
        for user in users
    ]
