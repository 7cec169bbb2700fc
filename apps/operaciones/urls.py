"""
URLs del módulo de operaciones
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

router = DefaultRouter()
router.register(r'', views.OperacionViewSet, basename='operacion')

urlpatterns = [
    path('', include(router.urls)),
]
