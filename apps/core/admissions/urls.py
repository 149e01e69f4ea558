from django.urls import path

from .views import application_approve, application_decline, application_list, apply

urlpatterns = [
    path('apply/<str:kind>/', apply, name='apply'),
    path('applications/', application_list, name='application_list'),
    path('applications/<str:kind>/<int:pk>/approve/', application_approve, name='application_approve'),
    path('applications/<str:kind>/<int:pk>/decline/', application_decline, name='application_decline'),
]
