"""
URLs for students app. Fixed paths come before the <pk> patterns.
"""
from django.urls import path
from . import views

urlpatterns = [
    path('students', views.student_list_or_create_view, name='student-list'),
    path('students/active', views.active_students_view, name='student-active'),
    path('students/expired', views.expired_students_view, name='student-expired'),
    path('students/expiring-soon', views.expiring_soon_students_view, name='student-expiring-soon'),
    path('students/inactive', views.inactive_students_view, name='student-inactive'),
    path('students/shift/<str:shift_id>', views.shift_students_view, name='student-shift'),
    path('students/<str:pk>/status', views.student_status_view, name='student-status'),
    path('students/<str:pk>/renew', views.student_renew_view, name='student-renew'),
    path('students/<str:pk>', views.student_detail_view, name='student-detail'),
]
