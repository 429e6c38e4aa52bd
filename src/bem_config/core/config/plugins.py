# src/bem_config/core/config/plugins.py
"""
Plugins de fragmento.

Um plugin é um callable `plugin(settings, all_settings, options)` que
recebe as settings de um fragmento (já com caminhos de nível
normalizados), as settings de todos os fragmentos da cascata e as
`CascadeOptions`, e devolve as novas settings daquele fragmento.

Plugins são aplicados em ordem de declaração; cada plugin enxerga a
saída completa do anterior.

Decisões arquiteturais:
    - A lista de plugins é validada na construção da cascata
    - A proveniência (`source`) do fragmento nunca é alterada
    - Um plugin que não devolve um mapa é erro fatal (`PluginError`)
    - Exceções levantadas pelo próprio plugin propagam sem tradução

Limites explícitos:
    - Não recalcula a raiz: plugins não devem alterar a chave `root`
    - Plugins são síncronos; o driver assíncrono os executa em thread
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Callable, Iterable, List, Mapping, Sequence, Tuple

from ..errors import PluginError
from .fragment import Fragment

Plugin = Callable[[dict, List[dict], Any], Mapping[str, Any]]


def plugin_name(plugin: Plugin) -> str:
    return getattr(plugin, "__qualname__", None) or type(plugin).__name__


def validate_plugins(plugins: Iterable[Any]) -> Tuple[Plugin, ...]:
    checked = tuple(plugins)
    for plugin in checked:
        if not callable(plugin):
            raise PluginError(repr(plugin), "plugin must be callable")
    return checked


def apply_plugin(plugin: Plugin, fragments: Sequence[Fragment], options: Any) -> List[Fragment]:
    """
    Aplica um plugin a cada fragmento, preservando ordem e proveniência.

    Raises:
        PluginError: Se o plugin devolver algo que não é um mapa.
    """
    snapshot = [deepcopy(dict(fragment.settings)) for fragment in fragments]

    out: List[Fragment] = []
    for fragment, settings in zip(fragments, snapshot):
        result = plugin(settings, snapshot, options)
        if not isinstance(result, Mapping):
            raise PluginError(plugin_name(plugin), f"expected a mapping, got {type(result).__name__}")
        out.append(Fragment.from_mapping(result, source=fragment.source))
    return out
