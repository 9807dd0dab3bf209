"""User domain models for the homestay platform."""

from __future__ import annotations

from django.contrib.auth.models import AbstractUser, UserManager  # type: ignore
from django.core.validators import RegexValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


PHONE_VALIDATOR = RegexValidator(
    regex=r"^\+?\d{7,15}$",
    message=_("Invalid phone number. Use the international format without spaces."),
)


class CustomUserManager(UserManager):
    """Username-based manager that also understands the platform roles."""

    use_in_migrations = True

    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault("role", CustomUser.RoleChoices.ADMIN)
        return super().create_superuser(username, email, password, **extra_fields)


class CustomUser(AbstractUser):
    """Platform user: a guest who books homestays or an administrator."""

    class RoleChoices(models.TextChoices):
        GUEST = "guest", _("Guest")
        ADMIN = "admin", _("Administrator")

    full_name = models.CharField(_("Full name"), max_length=255, blank=True)
    phone = models.CharField(
        _("Phone"),
        max_length=20,
        blank=True,
        validators=[PHONE_VALIDATOR],
    )
    role = models.CharField(
        _("Role"),
        max_length=20,
        choices=RoleChoices.choices,
        default=RoleChoices.GUEST,
    )
    is_booking = models.BooleanField(
        _("Has an active booking"),
        default=False,
        help_text=_("Set while the user owns a validated booking."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomUserManager()

    class Meta:
        verbose_name = _("User")
        verbose_name_plural = _("Users")
        ordering = ["username"]

    def __str__(self) -> str:
        return f"{self.username} ({self.get_role_display()})"

    def is_homestay_admin(self) -> bool:
        return self.role == self.RoleChoices.ADMIN or self.is_staff or self.is_superuser


User = CustomUser
