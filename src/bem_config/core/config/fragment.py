# src/bem_config/core/config/fragment.py
"""
Tipos canônicos da cascata: fragmentos e declarações de nível.

Um fragmento é uma unidade de configuração descoberta (um arquivo rc, o
bloco de defaults ou as variáveis de ambiente). Fragmentos são imutáveis:
a única transformação permitida é a normalização de caminhos de nível,
que produz **novos** fragmentos em vez de alterar os existentes.

Componentes principais:
    - LevelDeclaration → `{layer, path?, ...settings}` de um nível
    - Fragment         → settings + proveniência (`source`)
    - normalize_fragments → passo único e idempotente de normalização

Invariantes:
    - Após a normalização, todo nível possui `path` absoluto
    - Um nível sem `path` recebe `<layer>.blocks`
    - Normalizar duas vezes produz o mesmo resultado

Limites explícitos:
    - Não lê arquivos (responsabilidade do loader)
    - Não faz merge entre fragmentos
"""

from __future__ import annotations

import os
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..errors import DiscoveryError

LEVEL_SUFFIX = ".blocks"


def default_level_path(layer: str) -> str:
    return f"{layer}{LEVEL_SUFFIX}"


def resolve_path(base_dir: str, raw_path: str) -> str:
    """Resolve `raw_path` contra `base_dir`; caminhos absolutos são mantidos."""
    return os.path.normpath(os.path.join(base_dir, raw_path))


@dataclass(frozen=True)
class LevelDeclaration:
    """
    Declaração de um nível dentro de um fragmento.

    `settings` guarda o mapa completo declarado (incluindo `layer` e
    `path`), pois é ele que participa do merge por nível.
    """

    layer: Optional[str]
    path: Optional[str]
    settings: Mapping[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "LevelDeclaration":
        return cls(layer=data.get("layer"), path=data.get("path"), settings=dict(data))

    def resolved_path(self, base_dir: str) -> str:
        raw = self.path or default_level_path(str(self.layer))
        return resolve_path(base_dir, raw)

    def to_dict(self) -> Dict[str, Any]:
        return deepcopy(dict(self.settings))


@dataclass(frozen=True)
class Fragment:
    """
    Unidade de configuração descoberta.

    Campos:
    - settings: mapa completo lido da fonte (inclui `levels`, `sets`,
      `libs`, `modules`, `root` e chaves opacas)
    - source: caminho absoluto do arquivo de origem; `None` para defaults
      e variáveis de ambiente
    """

    settings: Mapping[str, Any]
    source: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], source: Optional[str] = None) -> "Fragment":
        return cls(settings=deepcopy(dict(data)), source=source)

    @property
    def is_root(self) -> bool:
        return bool(self.settings.get("root"))

    @property
    def directory(self) -> Optional[str]:
        if self.source is None:
            return None
        return os.path.dirname(self.source)

    @property
    def levels(self) -> Tuple[LevelDeclaration, ...]:
        """
        Declarações de nível do fragmento.

        Raises:
            DiscoveryError: Se `levels` existir e não for uma lista.
        """
        raw = self.settings.get("levels") or []
        if not isinstance(raw, (list, tuple)):
            where = self.source or "<defaults/env>"
            raise DiscoveryError(
                f"`levels` must be a list in {where}, got {type(raw).__name__}",
                path=self.source,
                reason="levels_type",
            )
        return tuple(LevelDeclaration.from_mapping(lvl) for lvl in raw if isinstance(lvl, Mapping))

    def common_settings(self) -> Dict[str, Any]:
        """Settings do fragmento sem a lista `levels`."""
        return {k: v for k, v in self.settings.items() if k != "levels"}

    def with_resolved_levels(self, base_dir: str) -> "Fragment":
        if "levels" not in self.settings:
            return self

        levels: List[Dict[str, Any]] = []
        for level in self.levels:
            data = level.to_dict()
            data["path"] = level.resolved_path(base_dir)
            levels.append(data)

        settings = dict(self.settings)
        settings["levels"] = levels
        return Fragment(settings=settings, source=self.source)


def normalize_fragments(fragments: Sequence[Fragment], base_dir: str) -> List[Fragment]:
    """
    Preenche e absolutiza os caminhos de nível de todos os fragmentos.

    Caminhos relativos (declarados ou o default `<layer>.blocks`) são
    resolvidos contra `base_dir`, que é a raiz do projeto ou, na ausência
    de um fragmento raiz, o diretório de trabalho da cascata.
    """
    return [fragment.with_resolved_levels(base_dir) for fragment in fragments]
