from app.services.email_service import create_notifier

notifier = create_notifier()


def get_notifier():
    return notifier
