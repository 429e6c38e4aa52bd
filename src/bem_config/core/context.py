# src/bem_config/core/context.py
"""
Contexto de resolução de uma cascata.

Este módulo define o `ResolutionContext`, o único detentor de estado de
uma instância de `BemConfig`. Ele substitui campos de cache espalhados
pelo objeto por um estado explícito com duas fases:

    - **não resolvido**: nenhum fragmento carregado ainda
    - **resolvido**: `ResolvedState` imutável (fragmentos normalizados,
      raiz, configuração efetiva), gravado uma única vez

Responsabilidades do módulo:
    - Guardar as opções imutáveis da cascata (`CascadeOptions`)
    - Guardar o estado resolvido (write-once)
    - Guardar as cascatas de bibliotecas já criadas, por nome
    - Registrar eventos de log estruturados

Invariantes:
    - O estado resolvido nunca é substituído depois de gravado
    - Escritas concorrentes do mesmo estado são idempotentes
    - Logs sempre incluem `cwd`, `scope` e `timestamp`

Limites explícitos:
    - Não descobre fragmentos
    - Não conhece o pai (delegação é unidirecional)
    - Não persiste nada em disco
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .config.fragment import Fragment
from .resolve.library import DEFAULT_MODULES_DIR


@dataclass(frozen=True)
class CascadeOptions:
    """Opções de uma cascata, copiadas uma vez na construção."""

    cwd: str
    name: str = "bem"
    fs_root: Optional[str] = None
    fs_home: Optional[str] = None
    defaults: Optional[Mapping[str, Any]] = None
    path_to_config: Optional[str] = None
    modules_dir: str = DEFAULT_MODULES_DIR
    env: Optional[Mapping[str, str]] = None
    extend_by: Optional[Mapping[str, Any]] = None
    plugins: Tuple[Callable[..., Any], ...] = ()


@dataclass(frozen=True)
class ResolvedState:
    """
    Estado derivado dos fragmentos descobertos.

    Campos:
    - fragments: fragmentos com caminhos de nível normalizados
    - root: diretório raiz do projeto, ou `None`
    - base_dir: `root` ou, na ausência dele, o `cwd` da cascata
    - effective: merge de todos os fragmentos (o mais específico vence)
    """

    fragments: Tuple[Fragment, ...]
    root: Optional[str]
    base_dir: str
    effective: Mapping[str, Any]


@dataclass
class ResolutionContext:
    options: CascadeOptions

    _state: Optional[ResolvedState] = field(default=None, init=False, repr=False)
    _libraries: Dict[str, Any] = field(default_factory=dict, init=False, repr=False)
    events: List[Dict[str, Any]] = field(default_factory=list, init=False)

    # -----------------------------
    # Resolved state
    # -----------------------------
    @property
    def resolved(self) -> bool:
        return self._state is not None

    @property
    def state(self) -> ResolvedState:
        if self._state is None:
            raise RuntimeError("Cascade state has not been resolved yet")
        return self._state

    def settle(self, state: ResolvedState) -> ResolvedState:
        """Grava o estado se ainda não existir e devolve o estado vigente."""
        if self._state is None:
            self._state = state
        return self._state

    # -----------------------------
    # Library cascades
    # -----------------------------
    def cached_library(self, name: str) -> Optional[Any]:
        return self._libraries.get(name)

    def remember_library(self, name: str, cascade: Any) -> Any:
        return self._libraries.setdefault(name, cascade)

    # -----------------------------
    # Logging
    # -----------------------------
    def log(self, *, scope: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "cwd": self.options.cwd,
            "scope": scope,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)
