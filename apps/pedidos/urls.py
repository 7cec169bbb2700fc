"""
URLs del módulo de pedidos
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

router = DefaultRouter()
router.register(r'', views.PedidoViewSet, basename='pedido')

urlpatterns = [
    path('', include(router.urls)),
]
