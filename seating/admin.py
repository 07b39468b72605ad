from django.contrib import admin
from .models import Seat, SeatAssignment, Shift


@admin.register(Shift)
class ShiftAdmin(admin.ModelAdmin):
    list_display = ['title', 'start_time', 'end_time']
    search_fields = ['title']


@admin.register(Seat)
class SeatAdmin(admin.ModelAdmin):
    list_display = ['seat_number', 'branch', 'created_at']
    list_filter = ['branch']
    search_fields = ['seat_number']


@admin.register(SeatAssignment)
class SeatAssignmentAdmin(admin.ModelAdmin):
    list_display = ['student', 'seat', 'shift', 'created_at']
    list_filter = ['shift', 'seat__branch']
    search_fields = ['student__name', 'seat__seat_number']
    raw_id_fields = ['student', 'seat']
