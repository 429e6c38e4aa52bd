# src/bem_config/core/resolve/levels.py
"""
Resolução de configuração por nível.

Este módulo concentra a regra central da cascata: settings comuns se
acumulam por todos os fragmentos até o limite do projeto, enquanto
overrides de nível só se aplicam ao caminho exato em que foram declarados.

Política de resolução (`level_config`):
    - apenas fragmentos do limite do projeto (inclusive) até o mais
      específico participam; fragmentos sem arquivo de origem (variáveis
      de ambiente, defaults) participam sempre, na sua posição
    - `common`: merge das settings de cada fragmento (sem `levels`)
    - `overrides`: merge das declarações de nível cujo caminho absoluto
      coincide com o nível consultado
    - em ambos, o fragmento mais específico vence
    - resultado = merge(common, overrides), sem chaves de controle

Decisões arquiteturais:
    - O override por nível sempre supera o default do projeto
    - Um nível sem nenhuma setting resolve para `None`, não para erro
    - Funções puras: nenhuma leitura de filesystem

Limites explícitos:
    - Não descobre fragmentos
    - Não resolve bibliotecas (o mapa de níveis recebe as listas prontas)
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

from ..config.fragment import Fragment, LevelDeclaration, resolve_path
from ..config.merge import deep_merge
from .root import root_boundary

BOOKKEEPING_KEYS = ("source", "path", "levels", "root")


def level_config(
    level_path: str,
    fragments: Sequence[Fragment],
    root: Optional[str],
    cwd: str,
) -> Optional[Dict[str, Any]]:
    """
    Resolve as settings efetivas de um nível.

    Args:
        level_path (str): Caminho do nível (relativo à raiz ou absoluto).
        fragments (Sequence[Fragment]): Fragmentos do mais específico
            para o mais geral.
        root (Optional[str]): Raiz do projeto, se houver.
        cwd (str): Diretório de trabalho usado quando não há raiz.

    Returns:
        Optional[Dict[str, Any]]: Settings do nível, ou `None` se nenhuma
        setting se aplica.
    """
    base_dir = root or cwd
    target = resolve_path(base_dir, level_path)

    boundary = root_boundary(fragments)
    # fragmentos sem origem (env, defaults) ficam sempre na cascata
    considered = [
        fragment
        for index, fragment in enumerate(fragments)
        if boundary is None or index <= boundary or fragment.source is None
    ]

    common: Dict[str, Any] = {}
    overrides: Dict[str, Any] = {}

    # do mais geral para o mais específico; o último merge vence
    for fragment in reversed(considered):
        common = deep_merge(common, fragment.common_settings())

        # dentro de um fragmento, a primeira declaração vence
        for level in reversed(fragment.levels):
            if level.resolved_path(base_dir) == target:
                overrides = deep_merge(overrides, level.settings)

    result = deep_merge(common, overrides)
    for key in BOOKKEEPING_KEYS:
        result.pop(key, None)

    return result or None


def _level_key(level: Mapping[str, Any]) -> Optional[str]:
    path = level.get("path")
    if path:
        return path
    layer = level.get("layer")
    if layer:
        return LevelDeclaration.from_mapping(level).resolved_path("")
    return None


def level_map(
    project_levels: Iterable[Mapping[str, Any]],
    library_level_lists: Iterable[Iterable[Mapping[str, Any]]] = (),
) -> Dict[str, Dict[str, Any]]:
    """
    Constrói o mapa caminho absoluto → settings de cada nível declarado.

    Níveis exportados pelas bibliotecas entram primeiro, na ordem de
    declaração; os níveis do projeto entram por último e vencem em caso
    de colisão de caminho.
    """
    result: Dict[str, Dict[str, Any]] = {}

    def add(level: Mapping[str, Any]) -> None:
        if not isinstance(level, Mapping):
            return
        key = _level_key(level)
        if key is None:
            return
        result[key] = deep_merge(result.get(key, {}), level)

    for levels in library_level_lists:
        for level in levels or ():
            add(level)

    for level in project_levels or ():
        add(level)

    return result
