# src/bem_config/core/config/__init__.py

"""
Camada de configuração do BEM Config.

Este pacote contém as estruturas e utilitários responsáveis por descobrir,
representar e mesclar os fragmentos de configuração que formam a cascata
de um projeto BEM.

Responsabilidades do pacote:
    - Descoberta de arquivos rc do diretório de trabalho até o limite do filesystem
    - Representação imutável de fragmentos e declarações de nível
    - Deep-merge determinístico com sobrescrita total de listas

Invariantes:
    - Fragmentos nunca são mutados após carregados
    - A mesma entrada sempre produz a mesma configuração efetiva

Limites explícitos:
    - Não resolve níveis, sets ou bibliotecas (ver `bem_config.core.resolve`)
    - Não valida schema além do tipo raiz
"""
