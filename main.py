from barbersbuddies.api.bookings import bookings_bp
from barbersbuddies.api.messaging import messaging_bp
from barbersbuddies.api.ratings import ratings_bp
from barbersbuddies.api.users import users_bp
from barbersbuddies.api.shops import shops_bp
from flask import Flask, jsonify
from dotenv import load_dotenv
from flasgger import Swagger
from swagger__config import SWAGGER_CONFIG, SWAGGER_TEMPLATE
import os

load_dotenv()
from barbersbuddies.config import Config, is_production_database, print_config_summary  # noqa: E402
from barbersbuddies.extensions import db, cors  # noqa: E402
from barbersbuddies.services.email_service import email_service  # noqa: E402
from barbersbuddies.services.push_service import push_service  # noqa: E402
from barbersbuddies.triggers import init_triggers  # noqa: E402
from barbersbuddies.cli import register_commands  # noqa: E402


def create_app(config_object=Config):
    print("Starting create_app()")
    app = Flask(__name__)
    try:
        print("Loading config...")
        app.config.from_object(config_object)
        print(f"Config loaded successfully ({len(app.config)} items)")

        if app.config.get("TESTING") and is_production_database(
            app.config.get("SQLALCHEMY_DATABASE_URI", "")
        ):
            raise RuntimeError("Refusing to run tests against a production database")

        if not app.config.get("TESTING"):
            print_config_summary(app.config)

        print("Initializing CORS...")
        cors.init_app(
            app,
            resources={r"/api/*": {"origins": app.config["ALLOWED_ORIGINS"]}},
            methods=["POST", "OPTIONS"],
            allow_headers=["Content-Type"],
        )
        print("CORS initialized")

        print("Initializing database...")
        db.init_app(app)
        init_triggers(app)
        print("Database initialized")

        print("Initializing email and push services...")
        email_service.init_app(app)
        push_service.init_app(app)

        print("Initializing Swagger/OpenAPI documentation...")
        # Determine host based on environment
        host = os.environ.get("API_HOST", "127.0.0.1:5000")
        swagger_template = SWAGGER_TEMPLATE.copy()
        swagger_template["host"] = host

        Swagger(app, config=SWAGGER_CONFIG, template=swagger_template)
        print("Swagger initialized - Access at /api/docs")
        print("Registering blueprints...")

        blueprints = [
            bookings_bp,
            messaging_bp,
            ratings_bp,
            users_bp,
            shops_bp,
        ]

        for bp in blueprints:
            app.register_blueprint(bp)
            print(f"  ✓ {bp.name} registered")

        print("All blueprints registered successfully")

        @app.errorhandler(404)
        def not_found(error):
            return jsonify({"error": "Not Found"}), 404

        @app.errorhandler(405)
        def method_not_allowed(error):
            return jsonify({"error": "Method Not Allowed"}), 405

        @app.route("/")
        def home():
            """
            Root endpoint - API status
            ---
            tags:
              - Utility
            responses:
              200:
                description: API is running
                schema:
                  type: object
                  properties:
                    status:
                      type: string
                    message:
                      type: string
            """
            return {"status": "ok", "message": "Backend is running!"}, 200

        register_commands(app)

        if app.config.get("SCHEDULER_ENABLED"):
            from barbersbuddies.scheduler import init_scheduler

            init_scheduler(app)

        print(f"Total routes registered: {len(list(app.url_map.iter_rules()))}")

    except Exception as e:
        print(f"Error during app creation: {e}")
        import traceback

        print(f"Full traceback: {traceback.format_exc()}")
        raise

    print("create_app() completed successfully")
    return app


app = create_app()


if __name__ == "__main__":
    # Create a .env containing:
    #       DATABASE_URL=mysql+pymysql://<USER>:<PASSWORD>@<HOST>:<PORT>/barbersbuddies
    #       RESEND_API_KEY=re_...
    #       FIREBASE_CREDENTIALS=serviceAccountKey.json

    port = int(os.environ.get("PORT", 5000))
    app.run(
        host="0.0.0.0", port=port, debug=os.environ.get("FLASK_ENV") != "production"
    )
