# tests/conftest.py
"""
Fixtures compartilhados para testes do BEM Config.

Este módulo define fixtures reutilizáveis que fornecem:
- um projeto BEM mínimo em disco (`tmp_path`) com uma biblioteca instalada
- um subdiretório com configuração mais específica
- um helper para escrever arquivos rc em YAML

Decisões arquiteturais:
    - Todo I/O acontece dentro de `tmp_path`
    - Cascatas são criadas com `fs_root`, `fs_home` e `env` explícitos,
      para que arquivos rc reais da máquina nunca participem dos testes
    - O conteúdo dos arquivos é declarado aqui, uma única vez

Invariantes:
    - Fixtures são determinísticas e isoladas por teste
    - Nenhuma fixture depende de variáveis de ambiente do processo

Limites explícitos:
    - Não valida comportamento (responsabilidade dos módulos de teste)
"""

from pathlib import Path

import pytest
import yaml


def write_rc(directory: Path, data: dict, filename: str = ".bemrc.yaml") -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path


PROJECT_RC = {
    "root": True,
    "color": "blue",
    "levels": [
        {"layer": "common"},
        {"layer": "desktop", "color": "green"},
    ],
    "libs": {"bem-core": {}},
    "sets": {
        "desktop": "common desktop @bem-core",
        "touch": [{"set": "desktop"}, {"layer": "touch"}, {"layer": "common"}],
    },
    "modules": {
        "bem-tools": {"plugins": {"create": {"techs": ["css", "js"]}}},
    },
}

LIBRARY_RC = {
    "root": True,
    "levels": [
        {"layer": "common", "origin": "core"},
        {"layer": "desktop", "origin": "core"},
    ],
    "sets": {"desktop": "common desktop"},
}

SUBDIR_RC = {
    "color": "red",
    "levels": [{"layer": "common", "color": "purple"}],
}


@pytest.fixture
def rc_writer():
    """Expõe `write_rc` para testes que montam árvores próprias."""
    return write_rc


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """
    Projeto BEM mínimo em disco.

    Estrutura:
        <tmp>/home/                               (home vazio)
        <tmp>/proj/.bemrc.yaml                    (root: true)
        <tmp>/proj/node_modules/bem-core/.bemrc   (biblioteca, YAML sem extensão)
        <tmp>/proj/sub/.bemrc.yaml                (configuração mais específica)

    Returns:
        Path: Diretório `<tmp>/proj`.
    """
    (tmp_path / "home").mkdir()
    proj = tmp_path / "proj"
    write_rc(proj, PROJECT_RC)
    write_rc(proj / "node_modules" / "bem-core", LIBRARY_RC, filename=".bemrc")
    write_rc(proj / "sub", SUBDIR_RC)
    return proj


@pytest.fixture
def make_config(tmp_path: Path):
    """
    Fábrica de `BemConfig` isolado do ambiente da máquina.

    O import é lazy para que falhas de import apareçam no teste que as
    provocou, e não na coleta.
    """
    from bem_config import BemConfig

    def _make(cwd, **options):
        options.setdefault("fs_root", str(tmp_path))
        options.setdefault("fs_home", str(tmp_path / "home"))
        options.setdefault("env", {})
        return BemConfig(str(cwd), **options)

    return _make
