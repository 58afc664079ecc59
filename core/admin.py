from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User, PushSubscription, Marksheet, SubjectResult


# Inline Admin Classes
class PushSubscriptionInline(admin.TabularInline):
    model = PushSubscription
    extra = 0
    readonly_fields = ['created_at']
    fields = ['endpoint', 'active', 'status', 'created_at']


class SubjectResultInline(admin.TabularInline):
    model = SubjectResult
    extra = 1
    fields = ['position', 'subject_name', 'marks', 'grade']


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['username', 'name', 'email', 'role', 'department', 'active', 'is_staff']
    list_filter = ['role', 'department', 'active', 'is_staff', 'is_superuser']
    search_fields = ['username', 'name', 'email']
    ordering = ['username']
    inlines = [PushSubscriptionInline]

    fieldsets = (
        (None, {'fields': ('username', 'password')}),
        ('Personal info', {'fields': ('name', 'email', 'role', 'department', 'active')}),
        ('Signature', {'fields': ('e_signature',)}),
        ('Permissions', {'fields': ('is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Important dates', {'fields': ('last_login', 'date_joined')}),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('username', 'name', 'email', 'password1', 'password2', 'role', 'department', 'active'),
        }),
    )

    readonly_fields = ['last_login', 'date_joined']


@admin.register(PushSubscription)
class PushSubscriptionAdmin(admin.ModelAdmin):
    list_display = ['user', 'active', 'status', 'created_at']
    list_filter = ['active', 'status']
    search_fields = ['user__email', 'user__name', 'endpoint']
    autocomplete_fields = ['user']
    readonly_fields = ['created_at']


@admin.register(Marksheet)
class MarksheetAdmin(admin.ModelAdmin):
    list_display = ['marksheet_id', 'reg_number', 'student_name', 'department', 'year',
                    'semester', 'examination_name', 'overall_grade']
    list_filter = ['department', 'year', 'semester']
    search_fields = ['marksheet_id', 'reg_number', 'student_name']
    autocomplete_fields = ['staff', 'hod']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [SubjectResultInline]
