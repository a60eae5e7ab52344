"""Random values for demo records. Every helper takes the caller's rng."""

import random
import string

FIRST_NAMES = [
    "James", "Michael", "David", "John", "Robert", "Carlos", "Ahmed", "Wei",
    "Marcus", "Antonio", "Kevin", "Tyler", "Brandon", "Derek", "Omar", "Jamal",
    "Luis", "Alex", "Chris", "Daniel", "Ryan", "Justin", "Eric", "Jason",
]

LAST_NAMES = [
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis",
    "Rodriguez", "Martinez", "Anderson", "Taylor", "Thomas", "Moore", "Jackson",
    "Martin", "Lee", "Thompson", "White", "Harris", "Clark", "Lewis", "Walker",
]

EMAIL_DOMAINS = ["gmail.com", "yahoo.com", "outlook.com", "mail.com"]
PHONE_PREFIXES = ["+49", "+1", "+44", "+33"]
ID_CHARS = string.ascii_letters + string.digits


def make_rng(seed=None):
    return random.Random(seed)


def random_id(rng, length=20):
    return "".join(rng.choice(ID_CHARS) for _ in range(length))


def random_name(rng):
    return f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"


def name_to_email(rng, name):
    local = ".".join(name.lower().split())
    return f"{local}{rng.randint(1, 99)}@{rng.choice(EMAIL_DOMAINS)}"


def random_phone(rng):
    digits = "".join(str(rng.randint(0, 9)) for _ in range(10))
    return f"{rng.choice(PHONE_PREFIXES)}{digits}"


def random_subset(rng, items, count):
    return rng.sample(list(items), min(count, len(items)))


def weighted_choice(rng, weights):
    """Pick a key of ``weights`` with probability proportional to its value."""
    keys = list(weights)
    return rng.choices(keys, weights=[weights[key] for key in keys], k=1)[0]
