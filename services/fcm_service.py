import os
from typing import Optional

import firebase_admin
from firebase_admin import credentials, exceptions, messaging

from config import FIREBASE_CREDENTIALS_PATH, GOOGLE_APPLICATION_CREDENTIALS
from utils.logger import setup_api_logger

logger = setup_api_logger()

# Initialise Firebase Admin only once
_initialized = False


def initialize_firebase_admin():
    """Initialise the Firebase Admin SDK"""
    global _initialized
    if _initialized:
        return
    try:
        if os.path.exists(FIREBASE_CREDENTIALS_PATH):
            cred = credentials.Certificate(FIREBASE_CREDENTIALS_PATH)
            firebase_admin.initialize_app(cred)
            _initialized = True
            logger.info("Firebase Admin initialised with %s", FIREBASE_CREDENTIALS_PATH)
        elif GOOGLE_APPLICATION_CREDENTIALS:
            # production: ambient service account
            firebase_admin.initialize_app()
            _initialized = True
            logger.info("Firebase Admin initialised from GOOGLE_APPLICATION_CREDENTIALS")
    except (ValueError, OSError) as e:
        logger.error("Error initialising Firebase Admin: %s", e)
        _initialized = False


def send_notification(
    fcm_token: str,
    title: str,
    body: str,
    data: Optional[dict] = None
) -> bool:
    """Send a push notification to one device"""
    initialize_firebase_admin()

    if not _initialized or not fcm_token:
        return False

    try:
        message = messaging.Message(
            notification=messaging.Notification(
                title=title,
                body=body,
            ),
            data=data or {},
            token=fcm_token,
            apns=messaging.APNSConfig(
                payload=messaging.APNSPayload(
                    aps=messaging.Aps(
                        badge=1,
                        sound="default",
                    ),
                ),
            ),
            android=messaging.AndroidConfig(
                priority="high",
                notification=messaging.AndroidNotification(
                    sound="default",
                    channel_id="high_importance_channel",
                ),
            ),
        )

        response = messaging.send(message)
        logger.info("Push notification sent: %s", response)
        return True
    except (exceptions.FirebaseError, ValueError) as e:
        logger.error("Error sending push notification: %s", e)
        return False


def notify_buddy_request(receiver, requester_name: str, request_id: int) -> bool:
    return send_notification(
        fcm_token=receiver.fcm_token,
        title="New buddy request",
        body=f"{requester_name} wants to be your travel buddy",
        data={"type": "buddy_request", "request_id": str(request_id)},
    )


def notify_buddy_accepted(requester, receiver_name: str, request_id: int) -> bool:
    return send_notification(
        fcm_token=requester.fcm_token,
        title="Buddy request accepted",
        body=f"{receiver_name} accepted your buddy request",
        data={"type": "buddy_accepted", "request_id": str(request_id)},
    )
