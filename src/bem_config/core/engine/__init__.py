# src/bem_config/core/engine/__init__.py
"""
Executor das rotinas da cascata.

As rotinas do facade são geradores que produzem passos de I/O e de
fan-out; este pacote fornece os dois drivers que as executam:

    - run_sync  → passos bloqueantes, iteração sequencial
    - run_async → passos em thread, fan-out concorrente

Invariantes:
    - Os dois drivers produzem o mesmo valor para a mesma rotina
    - A ordem dos resultados de fan-out é sempre a ordem de declaração
"""
