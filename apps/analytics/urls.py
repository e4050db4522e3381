from django.urls import path
from . import views

app_name = 'analytics'

urlpatterns = [
    # Period statistics (?period=week|month|year)
    path('statistics/', views.statistics, name='statistics'),

    # USD -> Bs. rate
    path('exchange-rate/', views.exchange_rate, name='exchange-rate'),
]
