# tests/core/resolve/test_root.py
"""
Testes da detecção de raiz do projeto.

Decisões arquiteturais:
    - A raiz é o diretório do fragmento raiz mais externo
    - Sem fragmento raiz, o resultado é `None`
"""

from bem_config.core.config.fragment import Fragment
from bem_config.core.resolve.root import detect_root, root_boundary


def test_root_is_directory_of_outermost_root_fragment():
    fragments = [
        Fragment.from_mapping({"color": "red"}, source="/a/b/c/.bemrc"),
        Fragment.from_mapping({"root": True}, source="/a/b/.bemrc"),
        Fragment.from_mapping({"root": True}, source="/a/.bemrc"),
        Fragment.from_mapping({"color": "blue"}, source="/.bemrc"),
    ]
    assert detect_root(fragments) == "/a"
    assert root_boundary(fragments) == 2


def test_no_root_fragment_returns_none():
    fragments = [
        Fragment.from_mapping({"color": "red"}, source="/a/.bemrc"),
        Fragment.from_mapping({"root": True}),  # defaults sem origem não definem raiz
    ]
    assert detect_root(fragments) is None
    assert root_boundary(fragments) is None


def test_empty_fragment_list():
    assert detect_root([]) is None
