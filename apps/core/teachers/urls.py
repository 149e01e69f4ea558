from django.urls import path

from .views import (
    teacher_create,
    teacher_delete,
    teacher_detail,
    teacher_list,
    teacher_update,
)

urlpatterns = [
    path('', teacher_list, name='teacher_list'),
    path('add/', teacher_create, name='teacher_create'),
    path('<int:pk>/', teacher_detail, name='teacher_detail'),
    path('<int:pk>/edit/', teacher_update, name='teacher_update'),
    path('<int:pk>/delete/', teacher_delete, name='teacher_delete'),
]
