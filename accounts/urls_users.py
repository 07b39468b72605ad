"""Users Management API URLs"""
from django.urls import path
from .views_users import (
    profile_view,
    user_detail_view,
    user_permissions_view,
    users_list_or_create_view,
)

urlpatterns = [
    path('users', users_list_or_create_view),
    path('users/profile', profile_view),
    path('users/<str:pk>/permissions', user_permissions_view),
    path('users/<str:pk>', user_detail_view),
]
