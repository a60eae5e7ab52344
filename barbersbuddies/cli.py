# flask seed / shop-names / init-db commands
import click
from flask.cli import AppGroup, with_appcontext

from .extensions import db
from .models import Base
from .seed.random_data import make_rng
from .seed.runner import clean_demo_data, rebuild_shop_names, seed_demo_data

seed_cli = AppGroup("seed", help="Demo data for the BarbersBuddies backend.")
shop_names_cli = AppGroup("shop-names", help="Maintain the shop-name search index.")


@seed_cli.command("run")
@click.option("--seed", "seed_value", type=int, default=None, help="Random seed for repeatable data.")
def seed_run(seed_value):
    """Populate the database with demo data."""
    print("\n🌱 Starting BarbersBuddies Demo Data Seed...\n")
    try:
        seed_demo_data(db.session, make_rng(seed_value))
    except Exception as e:
        db.session.rollback()
        print(f"\n❌ Seed failed: {e}")
        raise click.Abort()


@seed_cli.command("clean")
def seed_clean():
    """Remove all demo data."""
    print("\n🧹 Cleaning demo data...\n")
    clean_demo_data(db.session)


@shop_names_cli.command("rebuild")
@click.option("--batch-size", default=400, show_default=True)
def shop_names_rebuild(batch_size):
    """Rebuild the shop-name index from the shops table."""
    print("Starting migration...")
    try:
        rebuild_shop_names(db.session, batch_size=batch_size)
    except Exception as e:
        db.session.rollback()
        print(f"Error during migration: {e}")
        raise click.Abort()


@click.command("init-db")
@with_appcontext
def init_db():
    """Create all tables."""
    Base.metadata.create_all(bind=db.engine)
    print("📦 Tables created")


def register_commands(app):
    app.cli.add_command(seed_cli)
    app.cli.add_command(shop_names_cli)
    app.cli.add_command(init_db)
