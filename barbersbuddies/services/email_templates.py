# Transactional email bodies. Every function returns (subject, html).
from markupsafe import escape

from ..utils.validators import compute_total_price, format_price

WRAPPER_STYLE = "font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;"
CARD_STYLE = (
    "background-color: #f8f9fa; padding: 20px; border-radius: 8px; margin: 20px 0;"
)


def _wrap(body):
    return f'<div style="{WRAPPER_STYLE}">{body}</div>'


def services_list_html(services, currency="€"):
    items = "".join(
        f"<li>{escape(service.get('name', ''))} - {currency}{format_price(service.get('price', 0))}</li>"
        for service in services or []
    )
    return f"<ul>{items}</ul>"


def _total(booking):
    if booking.selected_services:
        return format_price(compute_total_price(booking.selected_services))
    return format_price(booking.total_price or 0)


def _custom_service_html(booking):
    if not booking.custom_service:
        return ""
    return f"<p>Custom Service: {escape(booking.custom_service)}</p>"


def new_booking_for_shop(booking, currency="€"):
    subject = f"New Booking - ID: {booking.id}"
    html = _wrap(
        f"""
        <h1>New Booking</h1>
        <p>Booking ID: {escape(booking.id)}</p>
        <p>Customer: {escape(booking.user_name)}</p>
        <p>Email: {escape(booking.user_email)}</p>
        <p>Phone: {escape(booking.user_phone or 'Not provided')}</p>
        <p>Date: {escape(booking.selected_date)}</p>
        <p>Time: {escape(booking.selected_time)}</p>
        <h2>Services:</h2>
        {services_list_html(booking.selected_services, currency)}
        {_custom_service_html(booking)}
        <p><strong>Total: {currency}{_total(booking)}</strong></p>
        """
    )
    return subject, html


def booking_confirmation_for_customer(booking, currency="€"):
    subject = "Booking Confirmation"
    html = _wrap(
        f"""
        <h1>Your Booking is Confirmed</h1>
        <p>Dear {escape(booking.user_name)},</p>
        <p>Your booking (ID: {escape(booking.id)}) has been confirmed for
        {escape(booking.selected_date)} at {escape(booking.selected_time)}.</p>
        <h2>Services:</h2>
        {services_list_html(booking.selected_services, currency)}
        {_custom_service_html(booking)}
        <p><strong>Total: {currency}{_total(booking)}</strong></p>
        <p>If you need to make any changes, please contact us with your booking ID.</p>
        """
    )
    return subject, html


def booking_updated_for_customer(booking, currency="€"):
    subject = "Your Appointment Has Been Updated"
    html = _wrap(
        f"""
        <h1>Appointment Update</h1>
        <p>Dear {escape(booking.user_name)},</p>
        <p>Your appointment has been updated with the following details:</p>
        <h2>New Appointment Details:</h2>
        <p>Date: {escape(booking.selected_date)}</p>
        <p>Time: {escape(booking.selected_time)}</p>
        <h3>Services:</h3>
        {services_list_html(booking.selected_services, currency)}
        <p><strong>Total: {currency}{_total(booking)}</strong></p>
        <p>If you have any questions, please contact us.</p>
        """
    )
    return subject, html


def booking_updated_for_shop(booking, currency="€"):
    subject = f"Booking Updated - ID: {booking.id}"
    html = _wrap(
        f"""
        <h1>Booking Update</h1>
        <p>Booking ID: {escape(booking.id)}</p>
        <p>Customer: {escape(booking.user_name)}</p>
        <p>Email: {escape(booking.user_email)}</p>
        <p>Phone: {escape(booking.user_phone or 'Not provided')}</p>
        <h2>Updated Details:</h2>
        <p>Date: {escape(booking.selected_date)}</p>
        <p>Time: {escape(booking.selected_time)}</p>
        <h3>Services:</h3>
        {services_list_html(booking.selected_services, currency)}
        <p><strong>Total: {currency}{_total(booking)}</strong></p>
        """
    )
    return subject, html


def booking_cancelled_for_customer(booking):
    subject = "Your Appointment Has Been Cancelled"
    html = _wrap(
        f"""
        <h1>Appointment Cancellation</h1>
        <p>Dear {escape(booking.user_name)},</p>
        <p>Your appointment has been cancelled.</p>
        <p><strong>Reason:</strong> {escape(booking.cancellation_reason or 'Not provided')}</p>
        <h2>Cancelled Appointment Details:</h2>
        <p>Date: {escape(booking.selected_date)}</p>
        <p>Time: {escape(booking.selected_time)}</p>
        <p>We apologize for any inconvenience. Feel free to book another appointment.</p>
        """
    )
    return subject, html


def booking_cancelled_for_shop(booking):
    subject = f"Booking Cancelled - ID: {booking.id}"
    html = _wrap(
        f"""
        <h1>Booking Cancellation</h1>
        <p>Booking ID: {escape(booking.id)}</p>
        <p>Customer: {escape(booking.user_name)}</p>
        <p>Email: {escape(booking.user_email)}</p>
        <p>Reason: {escape(booking.cancellation_reason or 'Not provided')}</p>
        <h2>Cancelled Booking Details:</h2>
        <p>Date: {escape(booking.selected_date)}</p>
        <p>Time: {escape(booking.selected_time)}</p>
        """
    )
    return subject, html


def booking_rescheduled_for_customer(booking, shop_name):
    subject = "Your Appointment Has Been Rescheduled"
    html = _wrap(
        f"""
        <h1>Appointment Rescheduled</h1>
        <p>Dear {escape(booking.user_name)},</p>
        <p>Your appointment at {escape(shop_name)} has been rescheduled:</p>
        <div style="{CARD_STYLE}">
            <h3>New Appointment Details:</h3>
            <p>Date: {escape(booking.selected_date)}</p>
            <p>Time: {escape(booking.selected_time)}</p>
            <p>Reason: {escape(booking.rescheduling_reason or 'Not provided')}</p>
        </div>
        <div style="{CARD_STYLE}">
            <h3>Previous Appointment Details:</h3>
            <p>Date: {escape(booking.previous_date)}</p>
            <p>Time: {escape(booking.previous_time)}</p>
        </div>
        <p>If this new time doesn't work for you, please contact us or reschedule through the app.</p>
        """
    )
    return subject, html


def booking_rescheduled_for_shop(booking):
    subject = f"Booking Rescheduled - ID: {booking.id}"
    html = _wrap(
        f"""
        <h1>Booking Rescheduled</h1>
        <p>Booking ID: {escape(booking.id)}</p>
        <p>Customer: {escape(booking.user_name)}</p>
        <p>Email: {escape(booking.user_email)}</p>
        <p>Rescheduled by: {escape(booking.rescheduled_by or 'Unknown')}</p>
        <p>Reason: {escape(booking.rescheduling_reason or 'Not provided')}</p>
        <h2>New Details:</h2>
        <p>Date: {escape(booking.selected_date)}</p>
        <p>Time: {escape(booking.selected_time)}</p>
        <h2>Previous Details:</h2>
        <p>Date: {escape(booking.previous_date)}</p>
        <p>Time: {escape(booking.previous_time)}</p>
        """
    )
    return subject, html


def new_message(booking_id, sender_name, content):
    subject = "New Message Regarding Your Appointment"
    html = _wrap(
        f"""
        <h2>New Message</h2>
        <p>You have a new message regarding booking #{escape(booking_id)}.</p>
        <p><strong>From:</strong> {escape(sender_name or 'Unknown')}</p>
        <p><strong>Message:</strong> {escape(content)}</p>
        <p>Please log in to respond.</p>
        """
    )
    return subject, html


def appointment_reminder(booking, shop_name, shop_address, currency="€"):
    subject = f"Upcoming Appointment Reminder - {shop_name}"
    html = _wrap(
        f"""
        <h1>Appointment Reminder</h1>
        <p>Dear {escape(booking.user_name)},</p>
        <p>This is a reminder about your upcoming appointment:</p>
        <div style="{CARD_STYLE}">
            <h2 style="margin-top: 0;">{escape(shop_name)}</h2>
            <p><strong>Date:</strong> {escape(booking.selected_date)}</p>
            <p><strong>Time:</strong> {escape(booking.selected_time)}</p>
            <p><strong>Location:</strong> {escape(shop_address or 'See shop page')}</p>
            <h3>Services:</h3>
            {services_list_html(booking.selected_services, currency)}
            <p><strong>Total Price:</strong> {currency}{_total(booking)}</p>
        </div>
        <p>Need to make changes? You can reschedule or cancel through our app or website.</p>
        <div style="margin-top: 20px; font-size: 0.8em; color: #666;">
            <p>You received this email because you enabled appointment reminders.
            To adjust your notification preferences, visit your account settings.</p>
        </div>
        """
    )
    return subject, html


def status_update(booking):
    subject = "Appointment Status Update"
    html = _wrap(
        f"""
        <h1>Appointment Status Update</h1>
        <p>Dear {escape(booking.user_name)},</p>
        <p>Your appointment status has been updated to: <strong>{escape(booking.status)}</strong></p>
        <p>Appointment Details:</p>
        <ul>
            <li>Date: {escape(booking.selected_date)}</li>
            <li>Time: {escape(booking.selected_time)}</li>
        </ul>
        """
    )
    return subject, html


DELETION_TEMPLATES = {
    "en": {
        "subject": "Account Deletion Confirmation - BarbersBuddies",
        "fallback_name": "Customer",
        "body": """
            <h2 style="color: #333;">Account Deletion Confirmation</h2>
            <p>Dear {name},</p>
            <p>Your BarbersBuddies account has been successfully deleted.</p>
            <p>If you did not request this deletion, please contact our support immediately.</p>
            <p>Thank you for using BarbersBuddies.</p>
        """,
    },
    "tr": {
        "subject": "Hesap Silme Onayı - BarbersBuddies",
        "fallback_name": "Müşterimiz",
        "body": """
            <h2 style="color: #333;">Hesap Silme Onayı</h2>
            <p>Sayın {name},</p>
            <p>BarbersBuddies hesabınız başarıyla silinmiştir.</p>
            <p>Bu silme işlemini siz talep etmediyseniz, lütfen derhal destek ekibimizle iletişime geçin.</p>
            <p>BarbersBuddies'ı kullandığınız için teşekkür ederiz.</p>
        """,
    },
}


def account_deletion(display_name, language="en"):
    template = DELETION_TEMPLATES.get(language) or DELETION_TEMPLATES["en"]
    name = escape(display_name or template["fallback_name"])
    return template["subject"], _wrap(template["body"].format(name=name))
