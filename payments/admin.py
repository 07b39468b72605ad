from django.contrib import admin
from .models import Expense


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = ['title', 'amount', 'date', 'branch', 'created_by', 'created_at']
    list_filter = ['branch', 'date']
    search_fields = ['title', 'note']
    date_hierarchy = 'date'
    readonly_fields = ['created_by', 'created_at']
