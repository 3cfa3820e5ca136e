from django.contrib import admin
from .models import Profile


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ['user', 'tier', 'xp', 'created']
    list_filter = ['tier', 'created']
    search_fields = ['user__username', 'user__email', 'display_name']
    readonly_fields = ['xp', 'tier', 'created', 'updated']
