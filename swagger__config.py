"""
Swagger/OpenAPI configuration for the BarbersBuddies booking API
"""

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec",
            "route": "/apispec.json",
            "rule_filter": lambda rule: True,
            "model_filter": lambda tag: True,
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/api/docs",
}


def _body(required, properties):
    return [
        {
            "in": "body",
            "name": "body",
            "required": True,
            "schema": {"type": "object", "required": required, "properties": properties},
        }
    ]


def _responses(success_ref, *errors):
    responses = {200: {"description": "OK", "schema": {"$ref": f"#/definitions/{success_ref}"}}}
    descriptions = {
        400: "Missing or invalid input",
        404: "Entity not found",
        405: "Method not allowed",
        409: "Illegal status change or concurrent update",
        500: "Unexpected failure",
    }
    for code in errors:
        responses[code] = {
            "description": descriptions[code],
            "schema": {"$ref": "#/definitions/Error"},
        }
    return responses


def _post(tag, summary, required, properties, success_ref, *errors):
    return {
        "post": {
            "tags": [tag],
            "summary": summary,
            "consumes": ["application/json"],
            "produces": ["application/json"],
            "parameters": _body(required, properties),
            "responses": _responses(success_ref, *errors),
        }
    }


STRING = {"type": "string"}
BOOLEAN = {"type": "boolean"}
SERVICES = {"type": "array", "items": {"$ref": "#/definitions/Service"}}

SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "BarbersBuddies Booking API",
        "description": "Booking lifecycle, messaging, ratings and notification endpoints for the BarbersBuddies barbershop platform",
        "contact": {"email": "support@barbersbuddies.com"},
        "version": "1.0.0",
    },
    "host": "",
    "basePath": "/",
    "schemes": ["http", "https"],
    "tags": [
        {"name": "Bookings", "description": "Create, update, cancel and reschedule bookings"},
        {"name": "Messaging", "description": "Shop and customer messages"},
        {"name": "Ratings", "description": "Reviews and shop replies"},
        {"name": "Users", "description": "Push tokens, reminder preferences, account deletion"},
        {"name": "Shops", "description": "Shop writes and name search"},
        {"name": "Utility", "description": "Service status"},
    ],
    "definitions": {
        "Error": {"type": "object", "properties": {"error": STRING}},
        "Message": {"type": "object", "properties": {"message": STRING}},
        "BookingCreated": {
            "type": "object",
            "properties": {"message": STRING, "bookingId": STRING},
        },
        "MessageSent": {
            "type": "object",
            "properties": {"success": BOOLEAN, "messageId": STRING},
        },
        "Service": {
            "type": "object",
            "required": ["name", "price"],
            "properties": {
                "name": STRING,
                "price": {"type": "number", "format": "float"},
                "duration": {"type": "integer"},
            },
        },
    },
    "paths": {
        "/api/createBooking": _post(
            "Bookings",
            "Create a booking and email the shop and customer",
            ["shopId", "shopEmail", "userName", "userEmail", "selectedDate", "selectedTime", "selectedServices"],
            {
                "shopId": STRING,
                "shopEmail": STRING,
                "userName": STRING,
                "userEmail": STRING,
                "userPhone": STRING,
                "selectedDate": {"type": "string", "example": "2026-01-10"},
                "selectedTime": {"type": "string", "example": "10:00"},
                "selectedServices": SERVICES,
                "customService": STRING,
                "employeeId": STRING,
                "employeeName": STRING,
            },
            "BookingCreated",
            400, 405, 500,
        ),
        "/api/updateBooking": _post(
            "Bookings",
            "Change date, time, services or notes of a booking",
            ["bookingId", "date", "time", "services"],
            {"bookingId": STRING, "date": STRING, "time": STRING, "services": SERVICES, "notes": STRING},
            "Message",
            400, 404, 409, 500,
        ),
        "/api/cancelBooking": _post(
            "Bookings",
            "Cancel a booking",
            ["bookingId"],
            {"bookingId": STRING, "reason": STRING, "cancelledBy": STRING},
            "Message",
            400, 404, 409, 500,
        ),
        "/api/rescheduleAppointment": _post(
            "Bookings",
            "Move a booking to a free slot",
            ["bookingId", "newDate", "newTime"],
            {"bookingId": STRING, "newDate": STRING, "newTime": STRING, "reason": STRING, "userId": STRING},
            "Message",
            400, 404, 409, 500,
        ),
        "/api/updateBookingStatus": _post(
            "Bookings",
            "Change the status of a booking",
            ["bookingId", "status"],
            {
                "bookingId": STRING,
                "status": {
                    "type": "string",
                    "enum": ["pending", "confirmed", "completed", "cancelled", "rescheduled"],
                },
            },
            "Message",
            400, 404, 409, 500,
        ),
        "/api/shopMessage": _post(
            "Messaging",
            "Send a message about a booking",
            ["bookingId", "content", "senderId", "shopId", "customerId"],
            {
                "bookingId": STRING,
                "content": STRING,
                "senderId": STRING,
                "senderType": {"type": "string", "enum": ["customer", "shop"]},
                "shopId": STRING,
                "customerId": STRING,
                "customerName": STRING,
                "shopName": STRING,
                "appointmentDetails": {"type": "object"},
            },
            "MessageSent",
            400, 500,
        ),
        "/api/respondToRating": _post(
            "Ratings",
            "Reply to a review",
            ["ratingId", "shopId", "response"],
            {"ratingId": STRING, "shopId": STRING, "response": STRING},
            "Message",
            400, 404, 500,
        ),
        "/api/submitRating": _post(
            "Ratings",
            "Review a completed booking",
            ["bookingId", "rating"],
            {
                "bookingId": STRING,
                "rating": {"type": "integer", "minimum": 1, "maximum": 5},
                "review": STRING,
                "userId": STRING,
            },
            "Message",
            400, 404, 409, 500,
        ),
        "/api/updateFCMToken": _post(
            "Users",
            "Register a device push token",
            ["userId", "token"],
            {"userId": STRING, "token": STRING},
            "Message",
            400, 404, 500,
        ),
        "/api/updateNotificationPreferences": _post(
            "Users",
            "Set reminder preferences",
            ["userEmail"],
            {
                "userEmail": STRING,
                "enabled": BOOLEAN,
                "oneHourBefore": BOOLEAN,
                "oneDayBefore": BOOLEAN,
                "threeDaysBefore": BOOLEAN,
                "oneWeekBefore": BOOLEAN,
                "onBooking": BOOLEAN,
            },
            "Message",
            400, 500,
        ),
        "/api/deleteAccount": _post(
            "Users",
            "Delete an account and send the confirmation email",
            ["userId"],
            {"userId": STRING, "language": {"type": "string", "enum": ["en", "tr"]}},
            "Message",
            400, 404, 500,
        ),
        "/api/createShop": _post(
            "Shops",
            "Create a shop",
            ["ownerId", "name", "email"],
            {
                "ownerId": STRING,
                "name": STRING,
                "email": STRING,
                "address": STRING,
                "phoneNumber": STRING,
                "services": SERVICES,
            },
            "Message",
            400, 500,
        ),
        "/api/updateShop": _post(
            "Shops",
            "Update shop details",
            ["shopId"],
            {"shopId": STRING, "name": STRING, "email": STRING, "address": STRING},
            "Message",
            400, 404, 500,
        ),
        "/api/deleteShop": _post(
            "Shops",
            "Delete a shop",
            ["shopId"],
            {"shopId": STRING},
            "Message",
            400, 404, 500,
        ),
        "/api/searchShops": _post(
            "Shops",
            "Find shops by name",
            ["query"],
            {"query": STRING},
            "Message",
            400, 500,
        ),
    },
}
