# src/bem_config/core/__init__.py
"""
Núcleo do BEM Config.

Subpacotes:
    - config  → fragmentos, descoberta e deep-merge
    - resolve → raiz, níveis, sets e bibliotecas (funções puras)
    - engine  → executor de rotinas (bloqueante e assíncrono)

Módulos:
    - context → estado por cascata e log estruturado
    - errors  → hierarquia de exceções
"""
