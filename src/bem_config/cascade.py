# src/bem_config/cascade.py
"""
Facade da cascata de configuração BEM.

Este módulo define `BemConfig`, o ponto de entrada público do pacote. Ele
orquestra descoberta de fragmentos, detecção de raiz, resolução de níveis,
expansão de sets e delegação para bibliotecas.

Cada operação existe em duas formas com semântica idêntica:
    - `await cascade.op(...)` → variante assíncrona
    - `cascade.op_sync(...)`  → variante bloqueante

As duas formas executam a **mesma rotina** (ver
`bem_config.core.engine.executor`); apenas o driver muda. Por isso
produzem resultados iguais e levantam as mesmas exceções para o mesmo
estado de filesystem.

Princípios fundamentais:
    - Cada instância possui seu próprio `ResolutionContext`
    - Bibliotecas são cascatas independentes, criadas sob demanda
    - Nenhuma referência do filho para o pai
    - Ausência de configuração resolve para `None` ou `[]`, nunca erro

Limites explícitos:
    - Não observa o filesystem
    - Não escreve nada em disco
    - Não mantém cache entre processos
"""

from __future__ import annotations

import os
from copy import deepcopy
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .core.config.fragment import Fragment, default_level_path, normalize_fragments, resolve_path
from .core.config.loader import LoaderOptions, discover_fragments
from .core.config.merge import merge_all
from .core.config.plugins import Plugin, apply_plugin, validate_plugins
from .core.context import CascadeOptions, ResolutionContext, ResolvedState
from .core.engine.executor import Routine, call, gather, run_async, run_sync
from .core.errors import (
    CyclicSetReferenceError,
    DiscoveryError,
    InvalidLibraryDeclarationError,
    LibraryNotFoundError,
    PluginError,
)
from .core.resolve.levels import level_config, level_map
from .core.resolve.library import DEFAULT_MODULES_DIR, library_directory, parse_library_declaration
from .core.resolve.root import detect_root
from .core.resolve.sets import LAYER, LIBRARY, SET, resolve_sets

Visiting = Tuple[Tuple[str, str], ...]


class BemConfig:
    """Cascata de configuração de um diretório de trabalho."""

    def __init__(
        self,
        cwd: Optional[str] = None,
        *,
        name: str = "bem",
        fs_root: Optional[str] = None,
        fs_home: Optional[str] = None,
        defaults: Optional[Mapping[str, Any]] = None,
        path_to_config: Optional[str] = None,
        modules_dir: str = DEFAULT_MODULES_DIR,
        env: Optional[Mapping[str, str]] = None,
        extend_by: Optional[Mapping[str, Any]] = None,
        plugins: Sequence[Plugin] = (),
    ):
        options = CascadeOptions(
            cwd=os.path.abspath(cwd or os.getcwd()),
            name=name,
            fs_root=fs_root,
            fs_home=fs_home,
            defaults=deepcopy(dict(defaults)) if defaults else None,
            path_to_config=path_to_config,
            modules_dir=modules_dir,
            env=dict(env) if env is not None else None,
            extend_by=deepcopy(dict(extend_by)) if extend_by else None,
            plugins=validate_plugins(plugins),
        )
        self.context = ResolutionContext(options=options)

    def __repr__(self) -> str:
        return f"BemConfig(cwd={self.cwd!r})"

    @property
    def cwd(self) -> str:
        return self.context.options.cwd

    # =====================================================
    # Rotinas (executadas por run_sync / run_async)
    # =====================================================

    def _state(self) -> Routine[ResolvedState]:
        if self.context.resolved:
            return self.context.state

        opts = self.context.options
        loader_options = LoaderOptions(
            cwd=opts.cwd,
            name=opts.name,
            fs_root=opts.fs_root,
            fs_home=opts.fs_home,
            defaults=opts.defaults,
            path_to_config=opts.path_to_config,
            env=opts.env,
            extend_by=opts.extend_by,
        )

        try:
            fragments = yield call(discover_fragments, loader_options)
            root = detect_root(fragments)
            base_dir = root or opts.cwd
            normalized = normalize_fragments(fragments, base_dir)
        except DiscoveryError as e:
            self.context.log(scope="discovery", level="error", message=e.message, path=e.path, error=e.to_dict())
            raise

        for plugin in opts.plugins:
            try:
                normalized = yield call(apply_plugin, plugin, normalized, opts)
            except PluginError as e:
                self.context.log(scope="plugins", level="error", message=e.message, error=e.to_dict())
                raise

        effective = merge_all(*(fragment.settings for fragment in reversed(normalized)))

        if self.context.resolved:
            return self.context.state

        state = self.context.settle(
            ResolvedState(
                fragments=tuple(normalized),
                root=root,
                base_dir=base_dir,
                effective=effective,
            )
        )
        self.context.log(
            scope="discovery",
            level="info",
            message=f"Discovered {len(normalized)} config fragment(s)",
            sources=[f.source for f in normalized],
        )
        self.context.log(
            scope="root",
            level="info",
            message=f"Project root is {root}" if root else "No root fragment found",
            root=root,
            base_dir=base_dir,
        )
        return state

    def _configs(self) -> Routine[List[Fragment]]:
        state = yield from self._state()
        return list(state.fragments)

    def _root(self) -> Routine[Optional[str]]:
        state = yield from self._state()
        return state.root

    def _effective(self) -> Routine[Dict[str, Any]]:
        state = yield from self._state()
        return deepcopy(dict(state.effective))

    def _level(self, level_path: str) -> Routine[Optional[Dict[str, Any]]]:
        state = yield from self._state()
        return level_config(level_path, state.fragments, state.root, self.cwd)

    def _module(self, module_name: str) -> Routine[Any]:
        state = yield from self._state()
        modules = state.effective.get("modules")
        if not isinstance(modules, Mapping):
            return None
        return deepcopy(modules.get(module_name))

    def _library(self, lib_name: str) -> Routine["BemConfig"]:
        cached = self.context.cached_library(lib_name)
        if cached is not None:
            return cached

        state = yield from self._state()
        opts = self.context.options

        try:
            declaration = parse_library_declaration(lib_name, state.effective.get("libs"))
        except InvalidLibraryDeclarationError as e:
            self.context.log(scope="library", level="error", message=e.message, library=lib_name, error=e.to_dict())
            raise

        directory = library_directory(
            declaration,
            base_dir=state.base_dir,
            cwd=opts.cwd,
            modules_dir=opts.modules_dir,
        )

        exists = yield call(os.path.isdir, directory)
        if not exists:
            error = LibraryNotFoundError(lib_name, directory)
            self.context.log(scope="library", level="error", message=error.message, library=lib_name, path=directory, error=error.to_dict())
            raise error

        cascade = BemConfig(
            directory,
            name=opts.name,
            fs_root=directory,
            fs_home=opts.fs_home,
            modules_dir=opts.modules_dir,
            env=opts.env,
            plugins=opts.plugins,
        )
        self.context.log(scope="library", level="info", message=f"Library {lib_name} found", library=lib_name, path=directory)
        return self.context.remember_library(lib_name, cascade)

    def _library_levels(self, lib_name: str) -> Routine[List[Dict[str, Any]]]:
        library = yield from self._library(lib_name)
        lib_state = yield from library._state()
        levels = lib_state.effective.get("levels") or []
        return [dict(level) for level in levels if isinstance(level, Mapping)]

    def _level_map(self) -> Routine[Dict[str, Dict[str, Any]]]:
        state = yield from self._state()
        libs = state.effective.get("libs") or {}
        lib_names = list(libs) if isinstance(libs, Mapping) else []

        library_levels = yield gather([self._library_levels(lib_name) for lib_name in lib_names])
        return level_map(state.effective.get("levels") or [], library_levels)

    def _layer_path(self, state: ResolvedState, layer: str) -> str:
        for level in state.effective.get("levels") or []:
            if isinstance(level, Mapping) and level.get("layer") == layer:
                return resolve_path(state.base_dir, level.get("path") or default_level_path(layer))
        return resolve_path(state.base_dir, default_level_path(layer))

    def _set_levels(self, set_name: str, visiting: Visiting) -> Routine[List[Dict[str, Any]]]:
        state = yield from self._state()
        sets = state.effective.get("sets") or {}

        if not isinstance(sets, Mapping) or not sets.get(set_name):
            return []

        key = (self.cwd, set_name)
        if key in visiting:
            trail = list(visiting[visiting.index(key):]) + [key]
            error = CyclicSetReferenceError([f"{s}@{cwd}" for cwd, s in trail])
            self.context.log(scope="sets", level="error", message=error.message, cycle=error.cycle, error=error.to_dict())
            raise error
        visiting = visiting + (key,)

        try:
            chunks = resolve_sets(sets).get(set_name) or []
        except CyclicSetReferenceError as e:
            self.context.log(scope="sets", level="error", message=e.message, cycle=e.cycle, error=e.to_dict())
            raise

        levels_map: Dict[str, Dict[str, Any]] = {}
        if any(chunk.kind == LAYER for chunk in chunks):
            levels_map = yield from self._level_map()

        parts: List[Optional[List[Dict[str, Any]]]] = []
        pending: List[Tuple[int, Routine[List[Dict[str, Any]]]]] = []

        for chunk in chunks:
            if chunk.kind == LIBRARY:
                pending.append((len(parts), self._library_set_levels(chunk.library, chunk.set or set_name, visiting)))
                parts.append(None)
            elif chunk.kind == SET:
                pending.append((len(parts), self._set_levels(chunk.set, visiting)))
                parts.append(None)
            else:
                level = levels_map.get(self._layer_path(state, chunk.layer))
                parts.append([level] if level is not None else [])

        results = yield gather([routine for _, routine in pending])
        for (index, _), result in zip(pending, results):
            parts[index] = result

        return [level for part in parts for level in part or []]

    def _library_set_levels(self, lib_name: str, set_name: str, visiting: Visiting) -> Routine[List[Dict[str, Any]]]:
        library = yield from self._library(lib_name)
        levels = yield from library._set_levels(set_name, visiting)
        return levels

    # =====================================================
    # API assíncrona
    # =====================================================

    async def configs(self) -> List[Fragment]:
        return await run_async(self._configs())

    async def root(self) -> Optional[str]:
        return await run_async(self._root())

    async def effective_config(self) -> Dict[str, Any]:
        return await run_async(self._effective())

    async def level_config(self, level_path: str) -> Optional[Dict[str, Any]]:
        return await run_async(self._level(level_path))

    async def level_map(self) -> Dict[str, Dict[str, Any]]:
        return await run_async(self._level_map())

    async def resolve_set_levels(self, set_name: str, *, unique: bool = False) -> List[Dict[str, Any]]:
        levels = await run_async(self._set_levels(set_name, ()))
        return _unique_levels(levels) if unique else levels

    async def library(self, lib_name: str) -> "BemConfig":
        return await run_async(self._library(lib_name))

    async def module_config(self, module_name: str) -> Any:
        return await run_async(self._module(module_name))

    get = effective_config
    level = level_config
    levels = resolve_set_levels
    module = module_config

    # =====================================================
    # API síncrona
    # =====================================================

    def configs_sync(self) -> List[Fragment]:
        return run_sync(self._configs())

    def root_sync(self) -> Optional[str]:
        return run_sync(self._root())

    def effective_config_sync(self) -> Dict[str, Any]:
        return run_sync(self._effective())

    def level_config_sync(self, level_path: str) -> Optional[Dict[str, Any]]:
        return run_sync(self._level(level_path))

    def level_map_sync(self) -> Dict[str, Dict[str, Any]]:
        return run_sync(self._level_map())

    def resolve_set_levels_sync(self, set_name: str, *, unique: bool = False) -> List[Dict[str, Any]]:
        levels = run_sync(self._set_levels(set_name, ()))
        return _unique_levels(levels) if unique else levels

    def library_sync(self, lib_name: str) -> "BemConfig":
        return run_sync(self._library(lib_name))

    def module_config_sync(self, module_name: str) -> Any:
        return run_sync(self._module(module_name))

    get_sync = effective_config_sync
    level_sync = level_config_sync
    levels_sync = resolve_set_levels_sync
    module_sync = module_config_sync


def _unique_levels(levels: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Mantém a primeira ocorrência de cada caminho de nível."""
    seen = set()
    out: List[Dict[str, Any]] = []
    for level in levels:
        key = level.get("path") if isinstance(level, Mapping) else None
        if key is None:
            key = repr(level)
        if key in seen:
            continue
        seen.add(key)
        out.append(level)
    return out


def create(**options: Any) -> BemConfig:
    """Atalho equivalente a `BemConfig(**options)`."""
    return BemConfig(**options)
