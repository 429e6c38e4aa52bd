# tests/core/resolve/test_levels.py
"""
Testes da resolução de configuração por nível.

Este módulo valida a regra central da cascata:
- settings comuns se acumulam por todos os fragmentos até a raiz
- overrides de nível só se aplicam ao caminho declarado
- o override de nível sempre supera o default do projeto
- fragmentos mais específicos vencem fragmentos mais gerais
- fragmentos acima da raiz não participam

Invariantes:
    - `level_config` é pura: a mesma entrada produz a mesma saída
    - Chaves de controle (`source`, `path`, `levels`, `root`) nunca aparecem
"""

from bem_config.core.config.fragment import Fragment
from bem_config.core.resolve.levels import level_config, level_map


def _fragments():
    # do mais específico para o mais geral
    return [
        Fragment.from_mapping({"levels": [{"layer": "common"}], "color": "red"}),
        Fragment.from_mapping({"root": True, "color": "blue"}, source="/proj/.bemrc"),
    ]


def test_specific_fragment_beats_root_default():
    out = level_config("/proj/common.blocks", _fragments(), "/proj", "/proj")
    assert out == {"color": "red", "layer": "common"}


def test_common_settings_apply_to_undeclared_level():
    out = level_config("/proj/other.blocks", _fragments(), "/proj", "/proj")
    assert out == {"color": "red"}


def test_level_block_beats_project_wide_default():
    """
    O bloco de nível declarado no fragmento raiz vence o default comum do
    fragmento mais específico, mas apenas para o próprio caminho.
    """
    fragments = [
        Fragment.from_mapping({"color": "red"}, source="/proj/sub/.bemrc"),
        Fragment.from_mapping(
            {"root": True, "color": "blue", "levels": [{"layer": "common", "color": "green"}]},
            source="/proj/.bemrc",
        ),
    ]

    assert level_config("common.blocks", fragments, "/proj", "/proj/sub")["color"] == "green"
    assert level_config("desktop.blocks", fragments, "/proj", "/proj/sub")["color"] == "red"


def test_specific_level_block_beats_general_level_block():
    fragments = [
        Fragment.from_mapping({"levels": [{"layer": "common", "tech": "css"}]}),
        Fragment.from_mapping(
            {"root": True, "levels": [{"layer": "common", "tech": "js", "deps": True}]},
            source="/proj/.bemrc",
        ),
    ]
    out = level_config("common.blocks", fragments, "/proj", "/proj")
    assert out == {"layer": "common", "tech": "css", "deps": True}


def test_fragments_above_root_are_ignored():
    fragments = [
        Fragment.from_mapping({"root": True, "a": 1}, source="/proj/.bemrc"),
        Fragment.from_mapping({"b": 2, "levels": [{"layer": "common", "c": 3}]}, source="/.bemrc"),
    ]
    out = level_config("common.blocks", fragments, "/proj", "/proj")
    assert out == {"a": 1}


def test_sourceless_fragments_survive_the_root_boundary():
    fragments = [
        Fragment.from_mapping({"color": "env"}),
        Fragment.from_mapping({"root": True, "levels": [{"layer": "common"}]}, source="/proj/.bemrc"),
        Fragment.from_mapping({"home": True}, source="/home/.bemrc"),
        Fragment.from_mapping({"tech": "css", "color": "grey"}),
    ]
    out = level_config("common.blocks", fragments, "/proj", "/proj")
    # defaults entram com a menor prioridade; o rc do home continua fora
    assert out == {"color": "env", "layer": "common", "tech": "css"}


def test_without_root_everything_counts_and_paths_use_cwd():
    fragments = [
        Fragment.from_mapping({"levels": [{"layer": "common", "x": 1}]}),
        Fragment.from_mapping({"y": 2}),
    ]
    out = level_config("common.blocks", fragments, None, "/work")
    assert out == {"layer": "common", "x": 1, "y": 2}


def test_no_settings_resolves_to_none():
    assert level_config("/proj/common.blocks", [], "/proj", "/proj") is None
    only_root = [Fragment.from_mapping({"root": True}, source="/proj/.bemrc")]
    assert level_config("/proj/common.blocks", only_root, "/proj", "/proj") is None


def test_level_config_is_deterministic_and_pure():
    fragments = _fragments()
    first = level_config("/proj/common.blocks", fragments, "/proj", "/proj")
    first["color"] = "mutated"
    second = level_config("/proj/common.blocks", fragments, "/proj", "/proj")
    assert second == {"color": "red", "layer": "common"}


def test_level_map_project_wins_over_libraries():
    library_levels = [
        [{"layer": "common", "path": "/lib/common.blocks", "origin": "lib"}],
        [{"layer": "common", "path": "/shared/common.blocks", "origin": "lib2", "keep": True}],
    ]
    project_levels = [
        {"layer": "common", "path": "/proj/common.blocks"},
        {"layer": "shared", "path": "/shared/common.blocks", "origin": "project"},
    ]

    out = level_map(project_levels, library_levels)

    assert list(out) == ["/lib/common.blocks", "/shared/common.blocks", "/proj/common.blocks"]
    assert out["/shared/common.blocks"] == {
        "layer": "shared",
        "path": "/shared/common.blocks",
        "origin": "project",
        "keep": True,
    }
    assert out["/lib/common.blocks"]["origin"] == "lib"
