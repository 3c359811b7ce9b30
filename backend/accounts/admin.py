from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from accounts.models import User
from mechanics.models import MechanicProfile


class TelegramLinkedFilter(admin.SimpleListFilter):
    """Mechanics that can (or cannot) receive Telegram job alerts."""
    title = "Telegram"
    parameter_name = "telegram"

    def lookups(self, request, model_admin):
        return (
            ("linked", "Linked"),
            ("unlinked", "Not linked"),
        )

    def queryset(self, request, queryset):
        if self.value() == "linked":
            return queryset.filter(telegram_chat_id__isnull=False)
        if self.value() == "unlinked":
            return queryset.filter(telegram_chat_id__isnull=True)
        return queryset


class MechanicProfileInline(admin.StackedInline):
    model = MechanicProfile
    can_delete = False
    extra = 0
    fields = ("is_verified", "is_available", "specializations", "rating", "total_jobs")
    readonly_fields = ("rating", "total_jobs")


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ["username", "email", "role", "telegram_linked", "is_active"]
    list_filter = ["role", TelegramLinkedFilter, "is_active"]
    search_fields = ["username", "email", "phone_number"]
    ordering = ("username",)
    actions = ["unlink_telegram"]

    fieldsets = BaseUserAdmin.fieldsets + (
        ("Roadside", {"fields": ("role", "phone_number", "telegram_chat_id")}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ("Roadside", {"fields": ("role", "phone_number")}),
    )

    def get_inlines(self, request, obj):
        # Only mechanics have a profile to verify
        if obj is not None and obj.is_mechanic:
            return [MechanicProfileInline]
        return []

    @admin.display(boolean=True, description="Telegram")
    def telegram_linked(self, obj):
        return obj.telegram_chat_id is not None

    @admin.action(description="Unlink Telegram chat")
    def unlink_telegram(self, request, queryset):
        updated = queryset.filter(telegram_chat_id__isnull=False).update(telegram_chat_id=None)
        self.message_user(request, f"Unlinked {updated} user(s).")
