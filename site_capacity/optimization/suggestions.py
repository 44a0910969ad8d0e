"""
Localized (pt-PT) optimization suggestions derived from the optimizer output.
"""

from typing import Iterable

from ..schedule.calendar import format_day
from ..schedule.constraints import equipment_label
from ..schedule.models import Bottleneck, OptimizationSuggestion, ScheduleAdjustment, TaskSplit


def _baseline_suggestion() -> OptimizationSuggestion:
    return OptimizationSuggestion(
        title="Cronograma Otimizado",
        description=("O cronograma está bem balanceado. "
                     "Não foram detetados constrangimentos de capacidade."),
        type='resource',
        estimated_impact="Sem alterações necessárias",
    )


def _capacity_suggestion(capacity: list[Bottleneck]) -> OptimizationSuggestion:
    affected = sorted({uid for b in capacity for uid in b.task_uids})
    high = sum(1 for b in capacity if b.severity == 'high')
    if high:
        return OptimizationSuggestion(
            title=f"{high} Sobrecargas Críticas Detetadas",
            description=("Recomenda-se aumentar a equipa ou dividir trabalhos em fases "
                         "distintas para evitar congestionamento no estaleiro."),
            type='resource',
            affected_tasks=affected,
            estimated_impact=f"Redução de {high * 2}-{high * 3} dias",
        )
    worst = max(b.overload for b in capacity)
    return OptimizationSuggestion(
        title=f"{len(capacity)} Sobrecargas de Capacidade",
        description=(f"A mão de obra excede a capacidade do estaleiro em {len(capacity)} "
                     f"período(s) (até {worst} trabalhadores a mais). Considere reforçar "
                     "turnos ou reagendar tarefas não críticas."),
        type='resource',
        affected_tasks=affected,
        estimated_impact=f"Excesso máximo de {worst} trabalhadores",
    )


def _phase_suggestion(phase: list[Bottleneck]) -> OptimizationSuggestion:
    count = len(phase)
    unresolved = sum(1 for b in phase if not b.resolved)
    description = ("Algumas fases não podem ocorrer em paralelo devido a requisitos técnicos "
                   "(cura de betão, secagem, etc.).")
    if unresolved:
        description += f" {unresolved} conflito(s) exigem revisão manual."
    return OptimizationSuggestion(
        title=f"{count} Conflitos de Fases",
        description=description,
        type='sequence',
        affected_tasks=sorted({uid for b in phase for uid in b.task_uids}),
        estimated_impact=f"Ajuste de {count}-{count * 2} dias",
    )


def _equipment_suggestion(bottleneck: Bottleneck) -> OptimizationSuggestion:
    label = equipment_label(bottleneck.equipment_name)
    return OptimizationSuggestion(
        title=f"Conflito de Equipamento: {label}",
        description=(f"As fases {', '.join(bottleneck.phases)} precisam de {label} em simultâneo "
                     f"entre {format_day(bottleneck.date_range.start)} e "
                     f"{format_day(bottleneck.date_range.finish)}. Recomenda-se resequenciar "
                     "ou alugar equipamento adicional."),
        type='resource',
        affected_tasks=list(bottleneck.task_uids),
        estimated_impact=(f"Possível atraso de {bottleneck.overload * 2}-"
                          f"{bottleneck.overload * 5} dias sem intervenção"),
    )


def _shift_suggestion(adjustments: list[ScheduleAdjustment]) -> OptimizationSuggestion:
    total_days = sum(a.shift_days() for a in adjustments)
    return OptimizationSuggestion(
        title=f"{len(adjustments)} Ajustes de Datas Aplicados",
        description=("Tarefas não críticas foram adiadas dentro da sua folga para aliviar "
                     "picos de mão de obra e respeitar intervalos entre fases."),
        type='shift',
        affected_tasks=sorted({a.task_uid for a in adjustments}),
        estimated_impact=f"{total_days} dias de deslocação acumulada",
    )


def _split_suggestion(splits: list[TaskSplit]) -> OptimizationSuggestion:
    return OptimizationSuggestion(
        title=f"{len(splits)} Tarefas Divididas",
        description=("Tarefas com equipas grandes foram divididas em duas partes sequenciais "
                     "com metade da equipa, reduzindo a ocupação diária do estaleiro."),
        type='split',
        affected_tasks=sorted({uid for s in splits for uid in (s.original_uid, s.part2_uid)}),
        estimated_impact=f"{sum(s.workers for s in splits)} trabalhadores redistribuídos",
    )


def generate_suggestions(
    bottlenecks: Iterable[Bottleneck],
    adjustments: Iterable[ScheduleAdjustment] = (),
    splits: Iterable[TaskSplit] = (),
) -> list[OptimizationSuggestion]:
    """
    Build suggestions from bottlenecks, adjustments and splits.

    With no bottlenecks a single "Cronograma Otimizado" suggestion is
    returned. Otherwise: capacity summary, phase summary, one suggestion per
    equipment conflict, then shift and split summaries.
    """
    bottlenecks = list(bottlenecks)
    if not bottlenecks:
        return [_baseline_suggestion()]

    adjustments = list(adjustments)
    splits = list(splits)
    suggestions = []

    capacity = [b for b in bottlenecks if b.kind == 'capacity']
    if capacity:
        suggestions.append(_capacity_suggestion(capacity))

    phase = [b for b in bottlenecks if b.kind == 'phase_sequence']
    if phase:
        suggestions.append(_phase_suggestion(phase))

    for bottleneck in bottlenecks:
        if bottleneck.kind == 'equipment':
            suggestions.append(_equipment_suggestion(bottleneck))

    if adjustments:
        suggestions.append(_shift_suggestion(adjustments))
    if splits:
        suggestions.append(_split_suggestion(splits))

    return suggestions
