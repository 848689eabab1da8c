from django.contrib import admin

from .models import ExternalCustomerRecord


@admin.register(ExternalCustomerRecord)
class ExternalCustomerRecordAdmin(admin.ModelAdmin):
    list_display = ("user", "external_customer_id", "gateway", "created_at")
    list_filter = ("gateway",)
    search_fields = ("user__username", "user__email", "external_customer_id")
    readonly_fields = ("user", "external_customer_id", "gateway", "created_at")
