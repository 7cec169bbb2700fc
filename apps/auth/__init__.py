"""
Módulo de Autenticación

Este módulo maneja la autenticación con Supabase Auth.
Valida tokens de Supabase y restringe el panel a usuarios con rol admin.
"""
