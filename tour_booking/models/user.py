import logging
from datetime import datetime, timedelta, timezone

from mongoengine import DateTimeField, EmailField, StringField, ValidationError, queryset_manager

from tour_booking.models.base import BaseDocument
from tour_booking.utils.base import Role
from tour_booking.utils.config import settings
from tour_booking.utils.security import hash_password, verify_password


logger = logging.getLogger(__name__)

PASSWORD_MIN_LENGTH = 8


def _field_error(field_name: str, message: str) -> ValidationError:
    return ValidationError(
        message,
        field_name=field_name,
        errors={field_name: ValidationError(message, field_name=field_name)},
    )


class User(BaseDocument):
    """User document.

    Fields:
    - name (str): Display name
    - email (str, unique): Login identifier, stored lowercased
    - password (str, hashed): Bcrypt hash; plaintext only while a save is in flight
    - password_confirm (str): Transient, must equal the plaintext password; never stored
    - password_changed_at (datetime|None): Set when an existing user replaces the password
    - role (str): user/guide/lead-guide/admin

    `User.objects` never loads the hash. Use `User.with_password` where the
    hash is needed (login, password change).
    """
    name = StringField(required=True, null=False)
    email = EmailField(required=True, null=False, unique=True)
    password = StringField(null=False, min_length=PASSWORD_MIN_LENGTH)
    password_confirm = StringField(required=False, null=True)
    password_changed_at = DateTimeField(required=False, null=True)
    role = StringField(required=True, null=False, choices=Role.choices(), default=Role.USER.value)

    private_fields = ("password", "password_confirm")

    meta = {
        "collection": "users",
        "indexes": [
            {"fields": ["email"], "unique": True},
        ],
    }

    @queryset_manager
    def objects(doc_cls, queryset):
        return queryset.exclude("password")

    @queryset_manager
    def with_password(doc_cls, queryset):
        return queryset

    def clean(self):
        if self.email:
            self.email = self.email.strip().lower()

    def is_password_modified(self) -> bool:
        # Unsaved documents always carry a fresh plaintext password
        return self._created or "password" in getattr(self, "_changed_fields", [])

    def before_save(self) -> None:
        """Replace a newly set plaintext password with its bcrypt hash.

        Runs only when the password was set or reassigned; otherwise a stray
        confirmation is dropped. Field rules and the confirmation are checked
        against the plaintext first; nothing is hashed or written when they fail.
        """
        if not self.is_password_modified():
            self.password_confirm = None
            return

        self.validate()
        if not self.password:
            raise _field_error("password", "Please provide your password")
        if "\x00" in self.password:
            raise _field_error("password", "Password must not contain NUL characters")
        if self.password_confirm is None:
            raise _field_error("password_confirm", "Please confirm your password")
        if self.password_confirm != self.password:
            raise _field_error("password_confirm", "Passwords are not the same")

        if not self._created:
            self.password_changed_at = datetime.now(timezone.utc) - timedelta(
                seconds=settings.password_changed_skew_seconds
            )
            logger.info("Password changed for user %s", self.id)

        self.password = hash_password(self.password)
        self.password_confirm = None

    def correct_password(self, candidate_password: str, user_password: str | None = None) -> bool:
        """Check a candidate plaintext against the stored hash (defaults to this user's)."""
        if user_password is None:
            user_password = self.password
        return verify_password(candidate_password, user_password)

    def changed_password_after(self, jwt_timestamp: int) -> bool:
        """True when the password was changed after a token issued at `jwt_timestamp`."""
        if self.password_changed_at:
            changed_at = self.password_changed_at
            if changed_at.tzinfo is None:
                changed_at = changed_at.replace(tzinfo=timezone.utc)
            return jwt_timestamp < int(changed_at.timestamp())

        return False
