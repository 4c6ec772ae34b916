from django.db import models
from django.contrib.auth.models import AbstractUser, BaseUserManager
from phonenumber_field.modelfields import PhoneNumberField

from django.utils.translation import gettext_lazy as _


class UserManager(BaseUserManager):
    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('The Email field must be set')
        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self.create_user(email, password, **extra_fields)


class User(AbstractUser):
    USER = 'user'
    BRAND = 'brand'
    USER_TYPE_CHOICES = (
        (USER, 'User'),
        (BRAND, 'Brand'),
    )

    email = models.EmailField(unique=True, db_index=True)
    user_type = models.CharField(
        max_length=10,
        choices=USER_TYPE_CHOICES,
        default=USER,
        help_text="Reviewer account or brand account"
    )
    is_verified = models.BooleanField(default=False)
    bio = models.TextField(blank=True, default='')
    avatar = models.ImageField(upload_to='avatars/', null=True, blank=True)
    phone = PhoneNumberField(
        blank=True,
        help_text="Contact phone number in international format"
    )
    website = models.URLField(blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    objects = UserManager()

    class Meta:
        verbose_name_plural = _("Users")

    @property
    def is_brand(self):
        return self.user_type == self.BRAND

    @property
    def avatar_url(self):
        if not self.avatar:
            return None
        try:
            return self.avatar.url
        except ValueError:
            return None

    def __str__(self):
        return f"User email: {self.email}"
