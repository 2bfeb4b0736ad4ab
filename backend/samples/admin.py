from django.contrib import admin

from .models import SandSample, UploadHistory


@admin.register(SandSample)
class SandSampleAdmin(admin.ModelAdmin):
    """
    Samples arrive only through CSV uploads and are never edited; the admin
    can browse and delete them.
    """

    list_display = ("id", "latitude", "longitude", "d50", "dmed", "sediment_type", "created_at")
    list_filter = ("sediment_type",)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(UploadHistory)
class UploadHistoryAdmin(admin.ModelAdmin):
    list_display = ("uploaded_at", "original_filename", "accepted_count", "duplicate_count", "rejected_count")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
