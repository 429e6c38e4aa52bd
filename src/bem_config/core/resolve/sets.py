# src/bem_config/core/resolve/sets.py
"""
Expansão de sets nomeados.

Um set é uma composição ordenada de referências:
    - `{layer}`         → um nível declarado no mesmo escopo
    - `{library, set?}` → um set de uma biblioteca (default: o mesmo nome)
    - `{set}`           → outro set do mesmo escopo

Sets podem ser declarados como lista de mapas, como string com a forma
abreviada (`"common desktop @bem-core @bem-components/touch"`) ou como
lista misturando ambos:
    - `nome`      → `{layer: nome}`
    - `@lib`      → `{library: lib}`
    - `@lib/set`  → `{library: lib, set: set}`

Decisões arquiteturais:
    - Referências `{set}` conhecidas são expandidas no lugar, preservando a ordem
    - Referências `{set}` desconhecidas são mantidas (resolvem para vazio depois)
    - `{layer}` e `{library}` nunca são resolvidos aqui: dependem do filesystem
    - Ciclos são detectados por busca em profundidade com trilha explícita

Invariantes:
    - Nenhum set expandido contém referência `{set}` para set declarado
    - O mesmo mapa de sets produz sempre a mesma expansão

Limites explícitos:
    - Não acessa filesystem
    - Não resolve bibliotecas nem níveis
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from ..errors import CyclicSetReferenceError, InvalidSetDeclarationError

LAYER = "layer"
LIBRARY = "library"
SET = "set"


@dataclass(frozen=True)
class SetChunk:
    """Referência imutável dentro de um set. `kind` é `layer`, `library` ou `set`."""

    kind: str
    layer: Optional[str] = None
    library: Optional[str] = None
    set: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        if self.kind == LIBRARY:
            out = {"library": self.library}
            if self.set:
                out["set"] = self.set
            return out
        if self.kind == SET:
            return {"set": self.set}
        return {"layer": self.layer}


def _is_name(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def parse_token(set_name: str, token: str) -> SetChunk:
    if not token.startswith("@"):
        return SetChunk(kind=LAYER, layer=token)

    library, _, target = token[1:].partition("/")
    if not library:
        raise InvalidSetDeclarationError(set_name, token)
    return SetChunk(kind=LIBRARY, library=library, set=target or None)


def parse_chunk(set_name: str, chunk: Any) -> List[SetChunk]:
    if isinstance(chunk, str):
        return [parse_token(set_name, token) for token in chunk.split()]

    if not isinstance(chunk, Mapping):
        raise InvalidSetDeclarationError(set_name, chunk)

    if LIBRARY in chunk:
        if LAYER in chunk or not _is_name(chunk[LIBRARY]):
            raise InvalidSetDeclarationError(set_name, chunk)
        target = chunk.get(SET)
        if target is not None and not _is_name(target):
            raise InvalidSetDeclarationError(set_name, chunk)
        return [SetChunk(kind=LIBRARY, library=chunk[LIBRARY], set=target)]

    if SET in chunk:
        if LAYER in chunk or not _is_name(chunk[SET]):
            raise InvalidSetDeclarationError(set_name, chunk)
        return [SetChunk(kind=SET, set=chunk[SET])]

    if LAYER in chunk and _is_name(chunk[LAYER]):
        return [SetChunk(kind=LAYER, layer=chunk[LAYER])]

    raise InvalidSetDeclarationError(set_name, chunk)


def parse_set(set_name: str, declaration: Any) -> List[SetChunk]:
    """Converte a declaração de um set (string, mapa ou lista) em chunks."""
    if declaration is None:
        return []
    if isinstance(declaration, (str, Mapping)):
        return parse_chunk(set_name, declaration)
    if isinstance(declaration, list):
        chunks: List[SetChunk] = []
        for item in declaration:
            chunks.extend(parse_chunk(set_name, item))
        return chunks
    raise InvalidSetDeclarationError(set_name, declaration)


def resolve_sets(sets: Mapping[str, Any]) -> Dict[str, List[SetChunk]]:
    """
    Expande todos os sets de um escopo.

    Args:
        sets (Mapping[str, Any]): Mapa nome → declaração do set.

    Returns:
        Dict[str, List[SetChunk]]: Mapa nome → chunks expandidos.

    Raises:
        InvalidSetDeclarationError: Se algum chunk for malformado.
        CyclicSetReferenceError: Se algum set referenciar a si mesmo,
            direta ou transitivamente.
    """
    declared = {name: parse_set(name, value) for name, value in sets.items()}
    resolved: Dict[str, List[SetChunk]] = {}

    def expand(name: str, trail: List[str]) -> List[SetChunk]:
        if name in resolved:
            return resolved[name]
        if name in trail:
            raise CyclicSetReferenceError(trail[trail.index(name):] + [name])

        out: List[SetChunk] = []
        for chunk in declared[name]:
            if chunk.kind == SET and chunk.set in declared:
                out.extend(expand(chunk.set, trail + [name]))
            else:
                out.append(chunk)

        resolved[name] = out
        return out

    for name in declared:
        expand(name, [])

    return {name: list(resolved[name]) for name in declared}
