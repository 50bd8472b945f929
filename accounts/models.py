from django.contrib.auth.models import AbstractUser
from django.db import models
import uuid


class User(AbstractUser):
    """
    Custom User model extending Django's AbstractUser.

    Every actor in the ledger (batch creators, chick-out loaders, people who
    complete sales, salaried employees) is a User.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class UserRole(models.TextChoices):
        DIRECTOR = 'DIRECTOR', 'Director'
        MANAGER = 'MANAGER', 'Section Manager'
        WORKER = 'WORKER', 'Worker'

    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.WORKER,
        db_index=True,
        help_text="User's role on the farm"
    )
    phone = models.CharField(max_length=20, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'
        ordering = ['username']

    def __str__(self):
        return f"{self.get_full_name() or self.username} ({self.role})"

    @property
    def is_director(self):
        return self.role == self.UserRole.DIRECTOR

    @property
    def is_manager_or_director(self):
        return self.role in (self.UserRole.DIRECTOR, self.UserRole.MANAGER)
