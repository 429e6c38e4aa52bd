# src/bem_config/core/config/merge.py
"""
Utilitário canônico de deep-merge da cascata de configuração.

Este módulo implementa a política de merge utilizada em todas as etapas
do BEM Config: settings efetivos, níveis, mapa de níveis e bibliotecas.

Política de merge:
    - dict + dict → merge recursivo por chave
    - list        → sobrescrita total (sem merge elemento a elemento)
    - qualquer outro par de tipos → o override vence

Princípios fundamentais:
    - O merge é determinístico e puramente funcional
    - Nenhum input é mutado durante o processo
    - Não existem heurísticas implícitas ou mágicas

Invariantes:
    - A mesma entrada sempre produz a mesma saída
    - Chaves presentes em apenas um lado são preservadas
    - O resultado nunca compartilha objetos mutáveis com os inputs

Limites explícitos:
    - Não carrega arquivos de configuração
    - Não valida semântica de domínio
    - Não realiza coerção de tipos
"""

from copy import deepcopy
from typing import Any, Dict, Mapping, Optional

from ..errors import ConfigTypeConflictError


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Realiza um deep-merge determinístico entre dois mapas de configuração.

    Decisões arquiteturais:
        - O merge é puramente funcional (inputs não são mutados)
        - Listas do override substituem integralmente as da base
        - Tipos divergentes não são erro: o override vence

    Args:
        base (Mapping[str, Any]): Configuração de menor prioridade.
        override (Mapping[str, Any]): Configuração de maior prioridade.

    Returns:
        Dict[str, Any]: Novo dicionário resultante do deep-merge.

    Raises:
        ConfigTypeConflictError: Se algum dos inputs não for um mapa.
    """
    if not isinstance(base, Mapping) or not isinstance(override, Mapping):
        raise ConfigTypeConflictError(
            f"Deep-merge requer mapas no nível raiz, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}",
            details={"base": type(base).__name__, "override": type(override).__name__},
        )

    result: Dict[str, Any] = {key: deepcopy(value) for key, value in base.items()}

    for key, override_value in override.items():
        base_value = result.get(key)

        # dict -> merge recursivo
        if isinstance(base_value, Mapping) and isinstance(override_value, Mapping):
            result[key] = deep_merge(base_value, override_value)
            continue

        # list ou escalar -> sobrescrita
        result[key] = deepcopy(override_value)

    return result


def merge_all(*items: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Dobra `deep_merge` da esquerda para a direita; itens posteriores vencem.

    Itens `None` são ignorados, o que permite passar fragmentos opcionais
    sem filtragem prévia.
    """
    result: Dict[str, Any] = {}
    for item in items:
        if item is None:
            continue
        result = deep_merge(result, item)
    return result
