import logging

import firebase_admin
from firebase_admin import credentials, messaging

logger = logging.getLogger(__name__)


class PushService:
    """Firebase Cloud Messaging delivery by device token."""

    def __init__(self, app=None):
        self.enabled = False
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.enabled = bool(app.config.get("FCM_ENABLED"))
        if self.enabled and not app.testing:
            self._initialize_firebase(
                app.config.get("FIREBASE_CREDENTIALS"),
                app.config.get("FIREBASE_PROJECT_ID"),
            )
        app.extensions["push_service"] = self

    @staticmethod
    def _initialize_firebase(credentials_path, project_id):
        # Initialize Firebase Admin SDK (only once)
        try:
            firebase_admin.get_app()
            return
        except ValueError:
            pass

        options = {"projectId": project_id} if project_id else None
        if credentials_path:
            cred = credentials.Certificate(credentials_path)
            logger.info("Firebase Admin initialized from service account file")
        else:
            cred = credentials.ApplicationDefault()
            logger.info("Firebase Admin initialized with default credentials")
        firebase_admin.initialize_app(cred, options)

    def send(self, token, title, body, data=None):
        if not self.enabled:
            logger.info("Push disabled, skipping '%s'", title)
            return None

        message = messaging.Message(
            fid=token,
            notification=messaging.Notification(title=title, body=body),
            data={key: str(value) for key, value in (data or {}).items() if value is not None},
        )
        message_id = messaging.send(message)
        logger.info("Push '%s' delivered (id=%s)", title, message_id)
        return message_id


push_service = PushService()
