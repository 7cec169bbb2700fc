"""URLs del módulo de dashboard"""

from django.urls import path
from . import views

urlpatterns = [
    path('stats/', views.get_stats, name='dashboard-stats'),
    path('graficos/', views.get_graficos, name='dashboard-graficos'),
    path('cache/clear/', views.clear_cache, name='dashboard-cache-clear'),
]
