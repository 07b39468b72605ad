"""
Admin configuration for students app
"""
from django.contrib import admin
from .models import MembershipHistory, Student


class MembershipHistoryInline(admin.TabularInline):
    model = MembershipHistory
    extra = 0
    fields = ['membership_start', 'membership_end', 'total_fee', 'amount_paid', 'due_amount', 'changed_at']
    readonly_fields = fields
    can_delete = False
    show_change_link = True


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ['name', 'phone', 'branch', 'membership_end', 'due_amount', 'is_active']
    list_filter = ['is_active', 'branch']
    search_fields = ['name', 'phone', 'registration_number', 'aadhar_number']
    readonly_fields = ['due_amount', 'created_at', 'updated_at']
    inlines = [MembershipHistoryInline]


@admin.register(MembershipHistory)
class MembershipHistoryAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'branch', 'shift', 'total_fee', 'amount_paid', 'due_amount', 'changed_at']
    list_filter = ['branch', 'changed_at']
    search_fields = ['name', 'student__phone']
    raw_id_fields = ['student', 'seat']
    date_hierarchy = 'changed_at'
