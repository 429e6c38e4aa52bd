# src/bem_config/core/errors.py
"""
Exceções canônicas do BEM Config.

Este módulo define a hierarquia oficial de exceções utilizadas durante a
descoberta de fragmentos, o merge da cascata e a resolução de níveis,
sets e bibliotecas.

As exceções aqui definidas representam **falhas terminais explícitas**:
nenhuma delas é tratada localmente, nenhuma aciona fallback silencioso.
A ausência de configuração (nível sem settings, set não declarado) não é
erro e nunca passa por este módulo.

Princípios fundamentais:
    - Exceções são tipadas e semânticas
    - Toda exceção carrega `message` curta e `details` estruturado
    - O mesmo input produz a mesma exceção nas variantes sync e async

Invariantes:
    - Todas as exceções herdam de `BemConfigError`
    - `details` contém apenas dados serializáveis

Limites explícitos:
    - Não realiza recovery
    - Não registra eventos (responsabilidade do ResolutionContext)
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class BemConfigError(Exception):
    """
    Exceção base para erros do BEM Config.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Mensagem deve ser curta e humana
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
        hint: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = dict(details or {})
        self.hint = hint

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return {
            "type": type(self).__name__,
            "message": self.message,
            "details": dict(self.details),
            "hint": self.hint,
        }


class ConfigTypeConflictError(BemConfigError):
    """
    Exceção levantada quando o deep-merge recebe algo que não é um mapa
    no nível raiz.

    Exemplo:
        - base:     {"levels": []}
        - override: ["common"]
    """


class DiscoveryError(BemConfigError):
    """
    Falha ao ler ou interpretar um arquivo de configuração durante a
    descoberta de fragmentos.

    Cobre arquivos ilegíveis, YAML/JSON inválido e conteúdo raiz que não
    é um dicionário. A mensagem sempre nomeia o arquivo envolvido.
    """

    def __init__(self, message: str, *, path: Optional[str] = None, reason: Optional[str] = None):
        super().__init__(
            message,
            details={"path": path, "reason": reason},
            hint="Corrija ou remova o arquivo de configuração indicado.",
        )
        self.path = path


class InvalidLibraryDeclarationError(BemConfigError):
    """
    Uma entrada de `libs` existe mas não tem formato de mapa.

    Decisões arquiteturais:
        - A validação acontece em um passo explícito, antes de qualquer
          acesso ao filesystem
        - Nenhuma coerção é tentada (ex.: string → {"path": string})
    """

    def __init__(self, library: str, value: Any):
        super().__init__(
            f"Invalid `libs` format for library {library}: "
            f"expected a mapping, got {type(value).__name__}",
            details={"library": library, "value_type": type(value).__name__},
            hint="Declare a biblioteca como `{path: ...}` ou `{}`.",
        )
        self.library = library


class LibraryNotFoundError(BemConfigError):
    """O diretório resolvido para a biblioteca não existe no filesystem."""

    def __init__(self, library: str, path: str):
        super().__init__(
            f"Library {library} was not found at {path}",
            details={"library": library, "path": path},
            hint="Instale a dependência ou declare `libs.<nome>.path` explicitamente.",
        )
        self.library = library
        self.path = path


class CyclicSetReferenceError(BemConfigError):
    """
    Um set referencia a si mesmo, direta ou transitivamente.

    O atributo `cycle` lista os sets na ordem em que foram visitados,
    terminando no set que fecha o ciclo (ex.: ["a", "b", "a"]).
    """

    def __init__(self, cycle: List[str], *, scope: Optional[str] = None):
        chain = " -> ".join(cycle)
        message = f"Cyclic set reference: {chain}"
        if scope:
            message = f"{message} (in {scope})"
        super().__init__(
            message,
            details={"cycle": list(cycle), "scope": scope},
            hint="Remova a referência circular entre os sets indicados.",
        )
        self.cycle = list(cycle)


class InvalidSetDeclarationError(BemConfigError):
    """Um chunk de set não identifica exatamente um tipo (layer, library ou set)."""

    def __init__(self, set_name: str, chunk: Any):
        super().__init__(
            f"Invalid chunk in set {set_name}: {chunk!r}",
            details={"set": set_name, "chunk": repr(chunk)},
            hint="Use exatamente uma das chaves `layer`, `library` ou `set`.",
        )
        self.set_name = set_name


class PluginError(BemConfigError):
    """Um plugin de fragmento é inválido ou devolveu um resultado inválido."""

    def __init__(self, plugin: str, reason: str):
        super().__init__(
            f"Plugin {plugin} failed: {reason}",
            details={"plugin": plugin, "reason": reason},
            hint="Plugins recebem (settings, all_settings, options) e devolvem um mapa.",
        )
        self.plugin = plugin
