# tests/core/resolve/test_library.py
"""
Testes da validação e localização de bibliotecas (parte pura).
"""

import pytest

from bem_config.core.errors import InvalidLibraryDeclarationError
from bem_config.core.resolve.library import (
    LibraryDeclaration,
    library_directory,
    parse_library_declaration,
)


def test_undeclared_library_uses_modules_dir():
    declaration = parse_library_declaration("bem-core", {})
    assert declaration == LibraryDeclaration(name="bem-core")
    assert library_directory(declaration, base_dir="/proj", cwd="/proj/sub") == "/proj/sub/node_modules/bem-core"


def test_declared_relative_path_resolves_against_root():
    declaration = parse_library_declaration("design", {"design": {"path": "../design"}})
    assert declaration.declared is True
    assert library_directory(declaration, base_dir="/work/proj", cwd="/work/proj/sub") == "/work/design"


def test_declared_without_path_uses_modules_dir():
    declaration = parse_library_declaration("bem-core", {"bem-core": {"version": "4"}})
    out = library_directory(declaration, base_dir="/proj", cwd="/proj", modules_dir="libs")
    assert out == "/proj/libs/bem-core"


@pytest.mark.parametrize("value", ["../bem-core", ["x"], 3, True])
def test_non_mapping_entry_is_invalid(value):
    with pytest.raises(InvalidLibraryDeclarationError) as exc:
        parse_library_declaration("bem-core", {"bem-core": value})
    assert exc.value.library == "bem-core"


def test_non_string_path_is_invalid():
    with pytest.raises(InvalidLibraryDeclarationError):
        parse_library_declaration("bem-core", {"bem-core": {"path": 42}})


def test_non_mapping_libs_is_invalid():
    with pytest.raises(InvalidLibraryDeclarationError):
        parse_library_declaration("bem-core", ["bem-core"])
