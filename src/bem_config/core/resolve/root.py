# src/bem_config/core/resolve/root.py
"""
Detecção da raiz do projeto.

A raiz é o diretório do fragmento **mais externo** marcado com
`root: true`. Fragmentos chegam ordenados do mais específico para o mais
geral, portanto o mais externo é o último marcado na lista.

O mesmo fragmento define o limite da cascata por nível: fragmentos mais
gerais que ele não participam da resolução de níveis.
"""

from __future__ import annotations

from typing import Optional, Sequence

from ..config.fragment import Fragment


def root_boundary(fragments: Sequence[Fragment]) -> Optional[int]:
    """Índice do fragmento raiz mais externo, ou `None`."""
    for index in range(len(fragments) - 1, -1, -1):
        fragment = fragments[index]
        if fragment.is_root and fragment.source:
            return index
    return None


def detect_root(fragments: Sequence[Fragment]) -> Optional[str]:
    index = root_boundary(fragments)
    if index is None:
        return None
    return fragments[index].directory
