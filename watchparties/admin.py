from django.contrib import admin
from .models import WatchParty, PartyMember, GroupPick

class PartyMemberInline(admin.TabularInline):
    model = PartyMember
    extra = 0
    raw_id_fields = ['user']

class GroupPickInline(admin.TabularInline):
    model = GroupPick
    extra = 0
    raw_id_fields = ['movie']

@admin.register(WatchParty)
class WatchPartyAdmin(admin.ModelAdmin):
    list_display = ['name', 'invite_code', 'created_by', 'status', 'scheduled_for', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['name', 'invite_code', 'created_by__username']
    readonly_fields = ['invite_code']
    inlines = [PartyMemberInline, GroupPickInline]
