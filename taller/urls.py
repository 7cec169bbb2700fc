"""
R&L Taller URL Configuration

Este archivo define todas las rutas principales del proyecto.
Cada app tiene su propio archivo urls.py que se incluye aquí.
"""

from django.urls import path, include
from django.http import JsonResponse


def api_root(request):
    """Vista raíz de la API"""
    return JsonResponse({
        'message': 'R&L Taller API funcionando correctamente',
        'version': '1.0.0',
        'endpoints': {
            'auth': '/api/auth/',
            'usuarios': '/api/usuarios/',
            'pedidos': '/api/pedidos/',
            'operaciones': '/api/operaciones/',
            'asignaciones': '/api/asignaciones/',
            'pagos': '/api/pagos/',
            'registros': '/api/registros/',
            'dashboard': '/api/dashboard/',
        }
    })


urlpatterns = [
    # API Root
    path('', api_root, name='api-root'),
    path('api/', api_root, name='api-root-with-prefix'),

    path('api/auth/', include('apps.auth.urls')),
    path('api/usuarios/', include('apps.usuarios.urls')),
    path('api/pedidos/', include('apps.pedidos.urls')),
    path('api/operaciones/', include('apps.operaciones.urls')),
    path('api/asignaciones/', include('apps.asignaciones.urls')),
    path('api/pagos/', include('apps.pagos.urls')),
    path('api/registros/', include('apps.registros.urls')),
    path('api/dashboard/', include('apps.dashboard.urls')),
]
