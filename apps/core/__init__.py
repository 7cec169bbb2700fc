"""
Módulo Core

Piezas compartidas por las apps de tablas: ViewSet genérico sobre
Supabase, búsqueda en filas, throttling de escrituras y utilidades de
validación.
"""
