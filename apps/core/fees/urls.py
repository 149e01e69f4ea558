from django.urls import path

from .views import collection_report, monthly_payment_update

urlpatterns = [
    path('', collection_report, name='collection_report'),
    path(
        'students/<int:student_id>/months/<int:month_index>/',
        monthly_payment_update,
        name='monthly_payment_update',
    ),
]
