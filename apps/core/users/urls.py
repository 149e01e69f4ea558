from django.urls import path

from .views import account_settings, dashboard, guest_login

urlpatterns = [
    path('dashboard/', dashboard, name='dashboard'),
    path('settings/', account_settings, name='account_settings'),
    path('guest/', guest_login, name='guest_login'),
]
