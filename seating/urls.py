"""
URLs for seating app
"""
from django.urls import path
from . import views

urlpatterns = [
    path('shifts', views.shift_list_or_create_view, name='shift-list'),
    path('seats', views.seat_list_or_create_view, name='seat-list'),
]
