"""
URLs del módulo de asignaciones
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

router = DefaultRouter()
router.register(r'', views.AsignacionViewSet, basename='asignacion')

urlpatterns = [
    path('', include(router.urls)),
]
