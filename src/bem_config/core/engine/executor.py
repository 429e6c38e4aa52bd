# src/bem_config/core/engine/executor.py
"""
Executor de passos da cascata (bloqueante e assíncrono).

Os algoritmos do BEM Config são escritos **uma única vez**, como
geradores ("rotinas") que produzem passos em vez de executá-los:

    - `Call(func, *args)`   → operação de I/O (descoberta, `exists`)
    - `Gather(routines)`    → fan-out de sub-rotinas independentes

Dois drivers consomem as mesmas rotinas:

    - `run_sync`  → executa cada passo de forma bloqueante e sequencial
    - `run_async` → cada `Call` é um ponto de suspensão (`asyncio.to_thread`)
      e cada `Gather` roda as sub-rotinas concorrentemente (`asyncio.gather`)

Decisões arquiteturais:
    - O resultado de `Gather` segue sempre a ordem de declaração, nunca a de conclusão
    - Exceções de um passo são relançadas dentro da rotina, no ponto do `yield`
    - Em `Gather`, a exceção propagada é a da primeira sub-rotina em ordem
      de declaração, nos dois drivers

Invariantes:
    - A mesma rotina, sobre o mesmo filesystem, produz o mesmo valor nos dois drivers
    - Nenhum driver mantém estado entre execuções

Limites explícitos:
    - Não define timeouts, retries ou cancelamento
    - Não conhece fragmentos, níveis ou bibliotecas
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Generator, List, Sequence, Tuple, TypeVar

T = TypeVar("T")

Routine = Generator[Any, Any, T]


@dataclass(frozen=True)
class Call:
    """Passo de I/O: `func(*args)` bloqueante ou executado em thread."""

    func: Callable[..., Any]
    args: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class Gather:
    """Passo de fan-out: executa sub-rotinas e devolve os valores em ordem."""

    routines: Tuple[Routine, ...]


def call(func: Callable[..., Any], *args: Any) -> Call:
    return Call(func=func, args=args)


def gather(routines: Sequence[Routine]) -> Gather:
    return Gather(routines=tuple(routines))


def _first_error(results: Sequence[Any]) -> None:
    for result in results:
        if isinstance(result, BaseException):
            raise result


def run_sync(routine: Routine[T]) -> T:
    """Executa uma rotina até o fim com passos bloqueantes."""
    value: Any = None
    error: Exception | None = None

    while True:
        try:
            step = routine.throw(error) if error is not None else routine.send(value)
        except StopIteration as stop:
            return stop.value

        value, error = None, None
        try:
            if isinstance(step, Call):
                value = step.func(*step.args)
            elif isinstance(step, Gather):
                results: List[Any] = []
                for sub in step.routines:
                    try:
                        results.append(run_sync(sub))
                    except Exception as e:  # noqa: BLE001
                        results.append(e)
                _first_error(results)
                value = results
            else:
                raise TypeError(f"Unknown executor step: {step!r}")
        except Exception as e:  # noqa: BLE001
            error = e


async def run_async(routine: Routine[T]) -> T:
    """Executa uma rotina até o fim; I/O em threads e fan-out concorrente."""
    value: Any = None
    error: Exception | None = None

    while True:
        try:
            step = routine.throw(error) if error is not None else routine.send(value)
        except StopIteration as stop:
            return stop.value

        value, error = None, None
        try:
            if isinstance(step, Call):
                value = await asyncio.to_thread(step.func, *step.args)
            elif isinstance(step, Gather):
                results = await asyncio.gather(
                    *(run_async(sub) for sub in step.routines),
                    return_exceptions=True,
                )
                _first_error(results)
                value = list(results)
            else:
                raise TypeError(f"Unknown executor step: {step!r}")
        except Exception as e:  # noqa: BLE001
            error = e
