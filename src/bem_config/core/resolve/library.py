# src/bem_config/core/resolve/library.py
"""
Validação e localização de bibliotecas delegadas.

Uma biblioteca é uma dependência que carrega sua própria cascata de
configuração. Este módulo cobre apenas a parte pura da delegação:

    1. validar a entrada `libs[name]` (passo explícito e tipado)
    2. calcular o diretório candidato da biblioteca

A verificação de existência no filesystem e a criação da cascata aninhada
ficam com o facade, que as executa como passos do executor (bloqueante ou
assíncrono).

Decisões arquiteturais:
    - Entrada ausente é válida: usa-se o diretório convencional de instalação
    - Entrada presente e não-mapa é `InvalidLibraryDeclarationError`
    - Caminhos relativos declarados são resolvidos contra a raiz do projeto
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..config.fragment import resolve_path
from ..errors import InvalidLibraryDeclarationError

DEFAULT_MODULES_DIR = "node_modules"


@dataclass(frozen=True)
class LibraryDeclaration:
    name: str
    path: Optional[str] = None
    declared: bool = False


def parse_library_declaration(name: str, libs: Optional[Mapping[str, Any]]) -> LibraryDeclaration:
    """
    Valida a declaração de uma biblioteca.

    Raises:
        InvalidLibraryDeclarationError: Se `libs` ou a entrada existirem
            mas não forem mapas, ou se `path` não for uma string.
    """
    if libs and not isinstance(libs, Mapping):
        raise InvalidLibraryDeclarationError(name, libs)

    if not libs or name not in libs or libs[name] is None:
        return LibraryDeclaration(name=name)

    entry = libs[name]
    if not isinstance(entry, Mapping):
        raise InvalidLibraryDeclarationError(name, entry)

    path = entry.get("path")
    if path is not None and not isinstance(path, str):
        raise InvalidLibraryDeclarationError(name, path)

    return LibraryDeclaration(name=name, path=path or None, declared=True)


def library_directory(
    declaration: LibraryDeclaration,
    *,
    base_dir: str,
    cwd: str,
    modules_dir: str = DEFAULT_MODULES_DIR,
) -> str:
    """Diretório candidato: `path` declarado ou `<cwd>/<modules_dir>/<name>`."""
    if declaration.path:
        return resolve_path(base_dir, os.path.expanduser(declaration.path))
    return resolve_path(cwd, os.path.join(modules_dir, declaration.name))
