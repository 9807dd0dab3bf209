"""Users app package.

Defines the platform user. Besides the usual Django authentication
fields a user carries the ``is_booking`` flag that the booking engine
uses to enforce one active booking per user. Use
``apps.users.models.CustomUser`` as the AUTH_USER_MODEL.
"""
