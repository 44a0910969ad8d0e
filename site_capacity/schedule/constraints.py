"""
Default site constraints for Portuguese construction scheduling.

Phase codes, the phase overlap rules (which phases may run concurrently and
the curing/drying gap required when they may not), and the equipment each
phase occupies on site.
"""

import copy

from .models import Constraints, EquipmentConflict, PhaseOverlapRule

DEFAULT_MAX_WORKERS_PER_FLOOR = 20

CONSTRUCTION_PHASES = (
    'site_setup', 'demolition', 'earthworks', 'foundations', 'structure',
    'external_walls', 'roof', 'waterproofing', 'external_frames',
    'rough_in_plumbing', 'rough_in_electrical', 'rough_in_hvac', 'rough_in_gas',
    'rough_in_telecom', 'internal_walls', 'insulation', 'external_finishes',
    'internal_finishes', 'flooring', 'ceilings', 'carpentry',
    'plumbing_fixtures', 'electrical_fixtures', 'painting', 'metalwork',
    'elevators', 'fire_safety', 'external_works', 'testing', 'cleanup',
)

LICENSING_PHASES = (
    'licensing_preparation', 'specialty_projects', 'external_consultations',
    'licensing_approval', 'construction_authorization',
    'utilization_authorization',
)

ALL_PHASES = CONSTRUCTION_PHASES + LICENSING_PHASES

PHASE_OVERLAP_RULES = (
    # Structure
    PhaseOverlapRule('structure', 'rough_in_electrical', True,
                     reason="Condutas elétricas podem ser embebidas durante betonagem"),
    PhaseOverlapRule('structure', 'rough_in_plumbing', True,
                     reason="Tubagens podem ser embebidas durante betonagem"),
    PhaseOverlapRule('structure', 'waterproofing', False, 7,
                     "Betão deve curar antes de impermeabilizar (mínimo 7 dias)"),
    # Waterproofing
    PhaseOverlapRule('waterproofing', 'external_finishes', False, 2,
                     "Impermeabilização deve curar antes de revestir (mínimo 2 dias)"),
    PhaseOverlapRule('waterproofing', 'internal_finishes', False, 2,
                     "Impermeabilização deve secar antes de acabamentos interiores"),
    # Internal finishes
    PhaseOverlapRule('internal_finishes', 'painting', False, 3,
                     "Estuque/reboco deve secar 3 dias antes de pintar"),
    PhaseOverlapRule('internal_finishes', 'flooring', False, 2,
                     "Paredes devem estar rebocadas antes de assentar pavimentos"),
    PhaseOverlapRule('internal_finishes', 'carpentry', True,
                     reason="Carpintarias podem ser instaladas durante acabamentos"),
    # Painting
    PhaseOverlapRule('painting', 'flooring', False, 1,
                     "Pintura deve secar antes de assentar pavimentos (risco de manchas)"),
    PhaseOverlapRule('painting', 'carpentry', False, 0,
                     "Pintura antes de carpintarias (para não sujar)"),
    PhaseOverlapRule('painting', 'electrical_fixtures', True,
                     reason="Aparelhagem pode ser instalada após pintura"),
    # Flooring
    PhaseOverlapRule('flooring', 'carpentry', True,
                     reason="Áreas diferentes, sem risco de contaminação"),
    PhaseOverlapRule('flooring', 'plumbing_fixtures', True,
                     reason="Loiças sanitárias podem ser instaladas durante pavimentação"),
    # External works
    PhaseOverlapRule('external_finishes', 'external_works', True,
                     reason="Arranjos exteriores podem começar durante acabamentos de fachada"),
    # Rough-in trades work side by side
    PhaseOverlapRule('rough_in_electrical', 'rough_in_plumbing', True,
                     reason="Instalações elétricas e canalizações em áreas diferentes"),
    PhaseOverlapRule('rough_in_electrical', 'rough_in_hvac', True,
                     reason="Elétrica e AVAC podem trabalhar em paralelo"),
    PhaseOverlapRule('rough_in_plumbing', 'rough_in_hvac', True,
                     reason="Canalizações e AVAC podem trabalhar em paralelo"),
    # Ceilings
    PhaseOverlapRule('ceilings', 'painting', False, 1,
                     "Tetos falsos devem estar completos antes de pintar"),
    PhaseOverlapRule('ceilings', 'electrical_fixtures', True,
                     reason="Luminárias podem ser instaladas após tetos falsos"),
    # Fire safety
    PhaseOverlapRule('fire_safety', 'testing', False, 0,
                     "Sistema de incêndio deve estar instalado antes de testar"),
)

# Equipment each phase keeps busy on site
PHASE_EQUIPMENT = {
    'earthworks': ['crane'],
    'foundations': ['crane', 'concrete_pump'],
    'structure': ['crane', 'concrete_pump', 'scaffolding'],
    'external_walls': ['scaffolding'],
    'roof': ['crane', 'scaffolding'],
    'external_finishes': ['scaffolding'],
    'painting': ['scaffolding'],
    'elevators': ['crane'],
}

EQUIPMENT_MAX_CONCURRENT = {
    'crane': 1,
    'concrete_pump': 1,
    'scaffolding': 2,
}

EQUIPMENT_LABELS = {
    'crane': 'grua',
    'concrete_pump': 'bomba de betão',
    'scaffolding': 'andaimes',
}


def equipment_label(equipment_name: str) -> str:
    """Localized label with the code, e.g. 'grua (crane)'."""
    label = EQUIPMENT_LABELS.get(equipment_name)
    if label is None:
        return equipment_name
    return f"{label} ({equipment_name})"


def _default_equipment_conflicts() -> list[EquipmentConflict]:
    conflicts = []
    for name, max_concurrent in EQUIPMENT_MAX_CONCURRENT.items():
        phases = [phase for phase, equipment in PHASE_EQUIPMENT.items() if name in equipment]
        conflicts.append(EquipmentConflict(name, max_concurrent, phases))
    return conflicts


def get_default_constraints() -> Constraints:
    """
    Default site constraints.

    20 workers per floor, crane x1, concrete pump x1, scaffolding x2 and the
    phase overlap rules above. Returns a fresh copy on every call so callers
    can edit it freely.
    """
    return Constraints(
        max_workers_per_floor=DEFAULT_MAX_WORKERS_PER_FLOOR,
        equipment_conflicts=_default_equipment_conflicts(),
        phase_overlap_rules=[copy.copy(rule) for rule in PHASE_OVERLAP_RULES],
    )
