"""
URLs del módulo de pagos
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

router = DefaultRouter()
router.register(r'', views.PagoViewSet, basename='pago')

urlpatterns = [
    path('', include(router.urls)),
]
