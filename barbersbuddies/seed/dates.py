# Dates relative to the day the seed runs
from datetime import date, datetime, time, timedelta


def today():
    return date.today()


def date_string(days_offset, base=None):
    return ((base or today()) + timedelta(days=days_offset)).isoformat()


def random_date(rng, min_offset, max_offset, base=None):
    return date_string(rng.randint(min_offset, max_offset), base)


def random_time_slot(rng, open_time="09:00", close_time="18:00"):
    open_hour = int(open_time.split(":")[0])
    close_hour = int(close_time.split(":")[0])
    hour = rng.randrange(open_hour, close_hour)
    minute = "00" if rng.random() < 0.5 else "30"
    return f"{hour:02d}:{minute}"


def timestamp(rng, days_offset=0, at=None, base=None):
    """A datetime ``days_offset`` days from today, at ``at`` (HH:MM) or a random business hour."""
    day = (base or today()) + timedelta(days=days_offset)
    if at:
        hours, minutes = (int(part) for part in at.split(":"))
    else:
        hours, minutes = rng.randint(8, 19), rng.choice((0, 30))
    return datetime.combine(day, time(hours, minutes))


def past_dates(count=5, base=None):
    return [date_string(-(count - i), base) for i in range(count)]


def future_dates(count=7, base=None):
    return [date_string(i + 1, base) for i in range(count)]
