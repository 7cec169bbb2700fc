"""
URLs del módulo de registros de trabajo
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

router = DefaultRouter()
router.register(r'', views.RegistroViewSet, basename='registro')

urlpatterns = [
    path('', include(router.urls)),
]
