from django.contrib import admin
from .models import XpEvent


@admin.register(XpEvent)
class XpEventAdmin(admin.ModelAdmin):
    list_display = ['user', 'event_type', 'xp_amount', 'reference_id', 'created']
    list_filter = ['event_type', 'created']
    search_fields = ['user__username', 'description', 'reference_id']
    raw_id_fields = ['user']
    readonly_fields = ['created']
