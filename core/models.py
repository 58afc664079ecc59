from django.db import models
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.utils.translation import gettext_lazy as _
from django.utils import timezone


# Enums as TextChoices
class UserRole(models.TextChoices):
    STUDENT = 'Student', _('Student')
    STAFF = 'Staff', _('Staff')
    HOD = 'HOD', _('Head of Department')
    PRINCIPAL = 'Principal', _('Principal')
    ADMIN = 'Admin', _('Admin')


class SubscriptionStatus(models.TextChoices):
    ACTIVE = 'active', _('Active')
    INACTIVE = 'inactive', _('Inactive')
    EXPIRED = 'expired', _('Expired')


# Custom User Manager
class UserManager(BaseUserManager):
    def create_user(self, username, email, password=None, **extra_fields):
        if not username:
            raise ValueError(_('The Username must be set'))
        if not email:
            raise ValueError(_('The Email must be set'))

        email = self.normalize_email(email)
        user = self.model(username=username, email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, username, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('active', True)
        extra_fields.setdefault('role', UserRole.ADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError(_('Superuser must have is_staff=True.'))
        if extra_fields.get('is_superuser') is not True:
            raise ValueError(_('Superuser must have is_superuser=True.'))

        return self.create_user(username, email, password, **extra_fields)


# Models
class User(AbstractBaseUser, PermissionsMixin):
    username = models.CharField(max_length=150, unique=True)
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=255)
    role = models.CharField(max_length=20, choices=UserRole.choices, default=UserRole.STUDENT)
    department = models.CharField(max_length=20, blank=True,
                                  help_text=_('Department code, e.g. CSE or AI_DS'))
    e_signature = models.TextField(
        blank=True,
        help_text=_('Signature image as a data URI, bare base64 payload or URL')
    )
    active = models.BooleanField(default=True)

    is_staff = models.BooleanField(default=False)
    is_superuser = models.BooleanField(default=False)
    date_joined = models.DateTimeField(default=timezone.now)

    objects = UserManager()

    USERNAME_FIELD = 'username'
    REQUIRED_FIELDS = ['email', 'name']

    class Meta:
        ordering = ['username']

    def __str__(self):
        return f"{self.name} ({self.username})"


class PushSubscription(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='push_subscriptions')
    endpoint = models.TextField()
    p256dh = models.CharField(max_length=255, blank=True)
    auth = models.CharField(max_length=255, blank=True)
    active = models.BooleanField(default=True)
    status = models.CharField(max_length=20, choices=SubscriptionStatus.choices, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    @property
    def is_active(self):
        """A subscription counts as active if either flag says so."""
        return self.active or self.status == SubscriptionStatus.ACTIVE

    def __str__(self):
        return f"{self.user.email} - {self.endpoint[:40]}"


class Marksheet(models.Model):
    marksheet_id = models.CharField(max_length=64, unique=True,
                                    help_text=_('Human-readable marksheet identifier'))
    reg_number = models.CharField(max_length=50)
    student_name = models.CharField(max_length=255)
    department = models.CharField(max_length=20)
    year = models.CharField(max_length=20)
    semester = models.CharField(max_length=20, blank=True)
    examination_name = models.CharField(max_length=255, blank=True)
    examination_date = models.DateField(null=True, blank=True)
    overall_grade = models.CharField(max_length=10, blank=True)
    staff = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True,
                              related_name='staff_marksheets')
    hod = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True,
                            related_name='hod_marksheets')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.marksheet_id} - {self.reg_number}"


class SubjectResult(models.Model):
    marksheet = models.ForeignKey(Marksheet, on_delete=models.CASCADE, related_name='subjects')
    position = models.PositiveIntegerField(default=0)
    subject_name = models.CharField(max_length=255)
    marks = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)
    grade = models.CharField(max_length=5, blank=True)

    class Meta:
        ordering = ['marksheet', 'position', 'id']

    def __str__(self):
        return f"{self.subject_name} ({self.grade})"
