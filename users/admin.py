from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import User

class CustomUserAdmin(UserAdmin):
    model = User
    fieldsets = UserAdmin.fieldsets + (
        ('Moodreel Profile', {'fields': ('name', 'avatar', 'preferred_genres', 'preferred_languages')}),
    )
    list_display = ['username', 'email', 'name', 'is_active', 'is_staff', 'date_joined']
    list_filter = ['is_active', 'is_staff']
    search_fields = ['username', 'email', 'name']

admin.site.register(User, CustomUserAdmin)
