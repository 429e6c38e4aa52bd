# src/bem_config/core/resolve/__init__.py
"""
Resolução pura da cascata.

Este pacote reúne os algoritmos que operam sobre a lista de fragmentos já
descoberta, sem acessar o filesystem:

    - root    → raiz do projeto e limite da cascata
    - levels  → settings por nível e mapa de níveis
    - sets    → expansão de sets com detecção de ciclos
    - library → validação e localização de bibliotecas

Limites explícitos:
    - Nenhum módulo daqui lê arquivos ou verifica existência de diretórios
"""
