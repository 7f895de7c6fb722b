import uuid

from django.contrib.auth.models import (
    AbstractBaseUser,
    BaseUserManager,
    PermissionsMixin,
)
from django.db import models
from django.utils import timezone


class UserManager(BaseUserManager):
    """Custom manager for the User model that uses email as the unique identifier."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("El correo electronico es obligatorio.")
        email = self.normalize_email(email)
        extra_fields.setdefault("is_active", True)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("role", User.Role.ADMIN)
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("El superusuario debe tener is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("El superusuario debe tener is_superuser=True.")

        return self.create_user(email, password, **extra_fields)

    def distributors(self):
        return self.filter(role=User.Role.DISTRIBUTOR)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model for the distributor network.

    Uses email as the unique identifier instead of a username.
    An ADMIN operates the house stock; a DISTRIBUTOR sells on commission
    and is ranked against the other distributors every period.
    """

    class Role(models.TextChoices):
        ADMIN = "ADMIN", "Administrador"
        DISTRIBUTOR = "DISTRIBUTOR", "Distribuidor"

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
    )
    email = models.EmailField(
        "correo electronico",
        unique=True,
        error_messages={
            "unique": "Ya existe un usuario con este correo electronico.",
        },
    )
    first_name = models.CharField("nombre", max_length=150)
    last_name = models.CharField("apellido", max_length=150, blank=True, default="")
    phone = models.CharField("telefono", max_length=30, blank=True, default="")
    role = models.CharField(
        "rol",
        max_length=20,
        choices=Role.choices,
        default=Role.DISTRIBUTOR,
        db_index=True,
    )
    is_active = models.BooleanField("activo", default=True, db_index=True)
    is_staff = models.BooleanField("miembro del staff", default=False)
    date_joined = models.DateTimeField("fecha de registro", default=timezone.now)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["first_name"]

    class Meta:
        verbose_name = "usuario"
        verbose_name_plural = "usuarios"
        ordering = ["first_name", "last_name"]

    def __str__(self):
        return self.get_full_name() or self.email

    def get_full_name(self):
        full_name = f"{self.first_name} {self.last_name}".strip()
        return full_name

    def get_short_name(self):
        return self.first_name

    @property
    def is_admin(self):
        return self.is_superuser or self.role == self.Role.ADMIN

    @property
    def is_distributor(self):
        return self.role == self.Role.DISTRIBUTOR
