from apscheduler.schedulers.background import BackgroundScheduler
import atexit
from datetime import datetime
from barbersbuddies.extensions import db
from barbersbuddies.services.outbox import dispatch_pending
from barbersbuddies.services.reminders import send_appointment_reminders

scheduler = BackgroundScheduler()


def init_scheduler(app):
    """Initialize the APScheduler scheduler with Flask app context."""

    reminder_minutes = app.config.get("REMINDER_INTERVAL_MINUTES", 60)
    outbox_seconds = app.config.get("OUTBOX_INTERVAL_SECONDS", 60)

    @scheduler.scheduled_job(
        "interval", minutes=reminder_minutes, id="appointment_reminders"
    )
    def reminder_task():
        """Email customers whose appointments fall inside a reminder window."""
        current_time_str = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

        try:
            with app.app_context():
                count = send_appointment_reminders()
                if count:
                    print(f"[SCHEDULER] {current_time_str} - Sent {count} reminder(s)")
                else:
                    print(f"[SCHEDULER] {current_time_str} - No reminders due")
        except Exception as e:
            print(f"[SCHEDULER] {current_time_str} - Error sending reminders: {e}")
            with app.app_context():
                db.session.rollback()

    @scheduler.scheduled_job(
        "interval", seconds=outbox_seconds, id="outbox_dispatch"
    )
    def outbox_task():
        """Retry email and push deliveries that are still pending."""
        current_time_str = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

        try:
            with app.app_context():
                summary = dispatch_pending()
                if any(summary.values()):
                    print(
                        f"[SCHEDULER] {current_time_str} - Outbox: {summary['sent']} sent, "
                        f"{summary['retrying']} retrying, {summary['failed']} failed"
                    )
        except Exception as e:
            print(f"[SCHEDULER] {current_time_str} - Error dispatching outbox: {e}")
            with app.app_context():
                db.session.rollback()

    if not scheduler.running:
        scheduler.start()
        print("[SCHEDULER] Scheduler started")
    else:
        print("[SCHEDULER] Scheduler already running (skipping duplicate start)")

    # Shut down the scheduler when exiting the app
    atexit.register(lambda: scheduler.shutdown() if scheduler.running else None)
