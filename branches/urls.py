"""
URLs for branches app
"""
from django.urls import path
from . import views

urlpatterns = [
    path('branches', views.branch_list_or_create_view, name='branch-list'),
    path('branches/<str:pk>', views.branch_detail_view, name='branch-detail'),
]
