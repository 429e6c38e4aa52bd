# src/bem_config/core/config/loader.py
"""
Descoberta canônica de fragmentos de configuração.

Este módulo localiza e carrega os arquivos rc (`.bemrc`, `.bemrc.json`,
`.bemrc.yaml`, `.bemrc.yml`) que compõem a cascata de um diretório de
trabalho, produzindo a lista ordenada de fragmentos consumida pelo
restante do BEM Config.

Ordem produzida (do mais específico para o mais geral):
    1. variáveis de ambiente `<name>_*` (quando existirem)
    2. um arquivo rc por diretório, de `cwd` subindo até `fs_root`
    3. o arquivo rc do diretório home (se ainda não visitado)
    4. `defaults` (menor prioridade)

Com `path_to_config`, a descoberta é curto-circuitada e apenas esse
arquivo é carregado. Em ambos os casos, `extend_by` é mesclado por cima
do fragmento mais específico.

Decisões arquiteturais:
    - YAML é o formato padrão (JSON é aceito como YAML válido)
    - Arquivos `.json` são lidos com o parser JSON
    - Arquivos vazios são interpretados como dicionários vazios
    - Qualquer falha de leitura ou parse é `DiscoveryError`

Limites explícitos:
    - Não faz merge de fragmentos
    - Não resolve caminhos de nível
    - Não mantém cache (responsabilidade do ResolutionContext)
"""

from __future__ import annotations

import json
import os
from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml  # PyYAML

from ..errors import DiscoveryError
from .fragment import Fragment
from .merge import deep_merge

RC_SUFFIXES = ("", ".json", ".yaml", ".yml")


@dataclass(frozen=True)
class LoaderOptions:
    """Parâmetros da descoberta de fragmentos."""

    cwd: str
    name: str = "bem"
    fs_root: Optional[str] = None
    fs_home: Optional[str] = None
    defaults: Optional[Mapping[str, Any]] = None
    path_to_config: Optional[str] = None
    env: Optional[Mapping[str, str]] = None
    extend_by: Optional[Mapping[str, Any]] = None


def _load_file(path: Path) -> Dict[str, Any]:
    """
    Carrega um arquivo rc e valida sua estrutura básica.

    Raises:
        DiscoveryError: Se o arquivo não puder ser lido, não puder ser
            interpretado ou se o conteúdo raiz não for um dicionário.
    """
    try:
        with path.open("r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except OSError as e:
        raise DiscoveryError(
            f"Cannot read config file {path}: {e.strerror or e}", path=str(path), reason="unreadable"
        ) from e
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise DiscoveryError(f"Cannot parse config file {path}: {e}", path=str(path), reason="parse") from e

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise DiscoveryError(
            f"Config root must be a mapping in {path}, got {type(data).__name__}",
            path=str(path),
            reason="root_type",
        )

    return data


def _find_rc_file(directory: Path, name: str) -> Optional[Path]:
    for suffix in RC_SUFFIXES:
        candidate = directory / f".{name}rc{suffix}"
        if candidate.is_file():
            return candidate
    return None


def _env_settings(env: Mapping[str, str], name: str) -> Dict[str, Any]:
    """
    Converte variáveis `<name>_a__b=valor` em `{"a": {"b": "valor"}}`.

    Valores permanecem strings; não há coerção de tipos.
    """
    prefix = f"{name}_"
    settings: Dict[str, Any] = {}
    for key in sorted(env):
        if not key.startswith(prefix) or len(key) == len(prefix):
            continue
        parts = [p for p in key[len(prefix):].split("__") if p]
        if not parts:
            continue
        node = settings
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = node[part] = {}
            node = child
        node[parts[-1]] = env[key]
    return settings


def _walk_up(start: Path, stop: Optional[Path]) -> List[Path]:
    dirs = [start]
    current = start
    while current != stop and current.parent != current:
        current = current.parent
        dirs.append(current)
    return dirs


def discover_fragments(options: LoaderOptions) -> List[Fragment]:
    """
    Descobre e carrega os fragmentos da cascata para `options.cwd`.

    Returns:
        List[Fragment]: Fragmentos do mais específico para o mais geral.

    Raises:
        DiscoveryError: Se algum arquivo encontrado for inválido, ou se
            `path_to_config` apontar para um arquivo inexistente.
    """
    cwd = Path(os.path.abspath(options.cwd))

    if options.path_to_config:
        explicit = Path(options.path_to_config)
        if not explicit.is_absolute():
            explicit = cwd / explicit
        if not explicit.is_file():
            raise DiscoveryError(f"Config file not found: {explicit}", path=str(explicit), reason="missing")
        fragments = [Fragment.from_mapping(_load_file(explicit), source=str(explicit))]
        return _extend_most_specific(fragments, options.extend_by)

    fragments = []

    env = os.environ if options.env is None else options.env
    env_settings = _env_settings(env, options.name)
    if env_settings:
        fragments.append(Fragment.from_mapping(env_settings))

    stop = Path(os.path.abspath(options.fs_root)) if options.fs_root else None
    visited = set()
    for directory in _walk_up(cwd, stop):
        visited.add(directory)
        rc_file = _find_rc_file(directory, options.name)
        if rc_file is not None:
            fragments.append(Fragment.from_mapping(_load_file(rc_file), source=str(rc_file)))

    home = Path(os.path.abspath(options.fs_home or os.path.expanduser("~")))
    if home not in visited:
        rc_file = _find_rc_file(home, options.name)
        if rc_file is not None:
            fragments.append(Fragment.from_mapping(_load_file(rc_file), source=str(rc_file)))

    if options.defaults:
        fragments.append(Fragment.from_mapping(deepcopy(dict(options.defaults))))

    return _extend_most_specific(fragments, options.extend_by)


def _extend_most_specific(fragments: List[Fragment], extend_by: Optional[Mapping[str, Any]]) -> List[Fragment]:
    """
    Aplica `extend_by` sobre o fragmento mais específico.

    Sem fragmentos, `extend_by` vira um fragmento próprio, sem origem.
    """
    if not extend_by:
        return fragments
    if not fragments:
        return [Fragment.from_mapping(extend_by)]

    head = fragments[0]
    extended = Fragment(settings=deep_merge(head.settings, extend_by), source=head.source)
    return [extended] + fragments[1:]
