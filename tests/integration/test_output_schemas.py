"""
Integration tests for output file schema validation.

Runs the CLI end to end and validates the CSV files it writes against
their registered schemas.

Run with: pytest tests/integration/test_output_schemas.py -v
"""

import json

import pandas as pd
import pytest

from schemas.registry import SCHEMA_REGISTRY, get_schema_for_file
from schemas.validator import validate_output_file
from site_capacity.cli import main
from site_capacity.export import OUTPUT_FILES, RESULT_JSON


@pytest.fixture
def output_dir(schedule_json, tmp_path):
    """Run the CLI once and return its output directory."""
    out = tmp_path / 'out'
    assert main([str(schedule_json), '--output-dir', str(out)]) == 0
    return out


class TestCliOutputSchemas:
    """Validate every file the CLI writes."""

    @pytest.mark.parametrize("filename", sorted(OUTPUT_FILES.values()))
    def test_output_file_schema(self, output_dir, filename):
        file_path = output_dir / filename
        assert file_path.exists()

        schema = get_schema_for_file(filename)
        assert schema is not None, f"No schema registered for {filename}"

        errors = validate_output_file(file_path, schema)
        assert errors == [], f"Schema validation errors for {filename}: {errors}"

    def test_every_output_is_registered(self):
        assert set(OUTPUT_FILES.values()) == set(SCHEMA_REGISTRY)

    def test_split_tasks_exported(self, output_dir):
        df = pd.read_csv(output_dir / 'optimized_tasks.csv')
        assert len(df) == 6
        parts = df[df['split_from_uid'].notna()]
        assert sorted(parts['split_from_uid'].astype(int)) == [2, 3]
        assert df['name'].str.endswith(' - Parte 1').sum() == 2

    def test_bottlenecks_exported(self, output_dir):
        df = pd.read_csv(output_dir / 'schedule_bottlenecks.csv')
        assert set(df['kind']) == {'phase_sequence', 'equipment'}
        assert set(df['equipment_name'].dropna()) == {'crane', 'concrete_pump'}

    def test_adjustments_exported(self, output_dir):
        df = pd.read_csv(output_dir / 'schedule_adjustments.csv')
        row = df.iloc[0]
        assert row['task_uid'] == 4
        assert row['new_start'] == '2026-03-21'
        assert row['shift_days'] == 6

    def test_timeline_equipment_exported(self, output_dir):
        timeline = pd.read_csv(output_dir / 'capacity_timeline.csv')
        equipment = timeline['equipment'].fillna('')
        assert equipment.str.contains('crane:2/1').any()

    def test_result_json(self, output_dir):
        with open(output_dir / RESULT_JSON, encoding='utf-8') as f:
            data = json.load(f)
        assert data['projectName'] == 'Moradia T3'
        assert len(data['splits']) == 2
        assert data['capacityTimeline'][0]['date'] == '2026-03-01'

    def test_report_printed(self, schedule_json, tmp_path, capsys):
        main([str(schedule_json), '--output-dir', str(tmp_path / 'out')])
        out = capsys.readouterr().out
        assert "SITE CAPACITY OPTIMIZATION REPORT" in out
        assert "Conflito de Equipamento: grua (crane)" in out
        assert "% utilization" in out


class TestCliOptions:

    def test_no_export(self, schedule_json, tmp_path):
        out = tmp_path / 'out'
        assert main([str(schedule_json), '--output-dir', str(out), '--no-export']) == 0
        assert not out.exists()

    def test_max_workers_override(self, schedule_json, tmp_path):
        out = tmp_path / 'out'
        assert main([str(schedule_json), '--output-dir', str(out), '--max-workers', '30']) == 0
        timeline = pd.read_csv(out / 'capacity_timeline.csv')
        assert set(timeline['workers_capacity']) == {30}

    def test_constraints_file(self, schedule_json, tmp_path):
        constraints = tmp_path / 'site.json'
        constraints.write_text(json.dumps({
            'maxWorkersPerFloor': 40,
            'equipmentConflicts': [],
            'phaseOverlapRules': [],
        }), encoding='utf-8')
        out = tmp_path / 'out'

        assert main([str(schedule_json), '--constraints', str(constraints), '--output-dir', str(out)]) == 0
        assert pd.read_csv(out / 'schedule_bottlenecks.csv').empty
        assert pd.read_csv(out / 'schedule_adjustments.csv').empty

    def test_missing_schedule_file(self, tmp_path):
        assert main([str(tmp_path / 'missing.json'), '--no-export']) == 1

    def test_invalid_schedule(self, tmp_path):
        path = tmp_path / 'bad.json'
        path.write_text(json.dumps({'tasks': [{'uid': 1}]}), encoding='utf-8')
        assert main([str(path), '--no-export']) == 1
