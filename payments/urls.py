"""
URLs for payments app
"""
from django.urls import path
from . import views

urlpatterns = [
    path('collections', views.collections_view, name='collection-list'),
    path('collections/<str:history_id>', views.settle_collection_view, name='collection-settle'),
    path('expenses', views.expense_list_or_create_view, name='expense-list'),
    path('students/stats/dashboard', views.dashboard_view, name='student-dashboard'),
]
