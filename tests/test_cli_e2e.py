"""End-to-end tests for the nencho CLI.

Runs the real click commands against input files in a temp folder with
settings isolated through NENCHO_CONFIG_PATH.
"""

import json

import pytest
import yaml
from click.testing import CliRunner

from nencho.cli.__main__ import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def input_file(tmp_path, scenario_data):
    """YAML file with the reference employee plus one owing additional tax."""
    owing = dict(scenario_data, employee_id="emp-002", withheld_income_tax=100_000)
    path = tmp_path / "2025_employees.yaml"
    path.write_text(yaml.safe_dump({"employees": [scenario_data, owing]}, allow_unicode=True))
    return path


@pytest.fixture
def uncapped_file(tmp_path, scenario_data):
    """Single employee with every deduction under its cap."""
    data = dict(scenario_data)
    data["deductions"] = dict(scenario_data["deductions"], life_insurance=120_000)
    path = tmp_path / "uncapped.json"
    path.write_text(json.dumps(data))
    return path


class TestReconcileCommand:

    def test_text_output(self, runner, input_file, isolated_config):
        result = runner.invoke(cli, ["reconcile", str(input_file)])

        assert result.exit_code == 0, result.output
        assert "emp-001" in result.output
        assert "Refund" in result.output
        assert "475,500" in result.output
        assert "Additional payment" in result.output
        assert "124,500" in result.output

    def test_cap_warning(self, runner, input_file, isolated_config):
        result = runner.invoke(cli, ["reconcile", str(input_file)])

        assert "life_insurance 150,000 exceeds cap 120,000" in result.output

    def test_json_output(self, runner, uncapped_file, isolated_config):
        result = runner.invoke(cli, ["reconcile", str(uncapped_file), "--format", "json"])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert len(payload) == 1
        assert payload[0]["taxable_income"] == 3_220_000
        assert payload[0]["annual_tax_amount"] == 224_500
        assert payload[0]["is_refund"] is True
        assert payload[0]["adjustment_amount"] == 475_500
        assert payload[0]["details"]["difference"] == 475_500

    def test_json_from_settings(self, runner, uncapped_file, isolated_config):
        (isolated_config / "settings.json").write_text(json.dumps({"default_output_format": "json"}))

        result = runner.invoke(cli, ["reconcile", str(uncapped_file)])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)[0]["employee_id"] == "emp-001"

    def test_strict_rejects_negative(self, runner, tmp_path, scenario_data, isolated_config):
        data = dict(scenario_data)
        data["deductions"] = dict(scenario_data["deductions"], basic=-480_000, life_insurance=0)
        path = tmp_path / "negative.yaml"
        path.write_text(yaml.safe_dump(data))

        result = runner.invoke(cli, ["reconcile", str(path), "--strict"])

        assert result.exit_code == 1
        assert "deductions.basic" in result.output
        assert "1 of 1 input(s) rejected" in result.output

    def test_permissive_accepts_negative(self, runner, tmp_path, scenario_data, isolated_config):
        data = dict(scenario_data)
        data["deductions"] = dict(scenario_data["deductions"], basic=-480_000, life_insurance=0)
        path = tmp_path / "negative.yaml"
        path.write_text(yaml.safe_dump(data))

        result = runner.invoke(cli, ["reconcile", str(path), "--format", "json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)[0]["total_deductions"] == 380_000 + 1_000_000 - 480_000

    def test_invalid_file(self, runner, tmp_path, isolated_config):
        path = tmp_path / "bad.yaml"
        path.write_text("employee_id: x\nyear: 2025\n")

        result = runner.invoke(cli, ["reconcile", str(path)])

        assert result.exit_code == 1
        assert "Entry 0" in result.output

    def test_invalid_utf8_file(self, runner, tmp_path, isolated_config):
        path = tmp_path / "sjis.yaml"
        path.write_bytes(b"employee_id: \xff\xfe\nyear: 2025\n")

        result = runner.invoke(cli, ["reconcile", str(path)])

        assert result.exit_code == 1
        assert "not valid UTF-8" in result.output
        assert not isinstance(result.exception, UnicodeDecodeError)

    def test_strict_json_shape_all_valid(self, runner, uncapped_file, isolated_config):
        result = runner.invoke(cli, ["reconcile", str(uncapped_file), "--format", "json", "--strict"])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload["rejected"] == []
        assert payload["results"][0]["adjustment_amount"] == 475_500

    def test_strict_json_shape_mixed(self, runner, tmp_path, scenario_data, isolated_config):
        valid = dict(scenario_data)
        valid["deductions"] = dict(scenario_data["deductions"], life_insurance=120_000)
        invalid = dict(valid, employee_id="emp-002", annual_bonuses=-1)
        path = tmp_path / "mixed.json"
        path.write_text(json.dumps([valid, invalid]))

        result = runner.invoke(cli, ["reconcile", str(path), "--format", "json", "--strict"])

        assert result.exit_code == 1
        payload = json.loads(result.output.split("Error:")[0])
        assert [r["employee_id"] for r in payload["results"]] == ["emp-001"]
        assert payload["rejected"][0]["employee_id"] == "emp-002"
        assert payload["rejected"][0]["issues"][0]["field"] == "annual_bonuses"
        assert "1 of 2 input(s) rejected" in result.output

    def test_evidence_entries(self, runner, tmp_path, evidence_data, isolated_config):
        path = tmp_path / "declarations.yaml"
        path.write_text(yaml.safe_dump(evidence_data, allow_unicode=True))

        result = runner.invoke(cli, ["reconcile", str(path), "--format", "json"])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload[0]["total_deductions"] == 2_643_000
        assert payload[0]["adjustment_amount"] == 641_800


class TestDeductionsCommand:

    @pytest.fixture
    def declarations_file(self, tmp_path, scenario_data, evidence_data):
        path = tmp_path / "declarations.yaml"
        path.write_text(yaml.safe_dump({"employees": [scenario_data, evidence_data]}))
        return path

    def test_json(self, runner, declarations_file, isolated_config):
        result = runner.invoke(cli, ["deductions", str(declarations_file), "--format", "json"])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert [p["employee_id"] for p in payload] == ["emp-101"]
        assert payload[0]["deductions"]["social_insurance"] == 1_032_000
        assert payload[0]["deductions"]["other"] == 276_000

    def test_text(self, runner, declarations_file, isolated_config):
        result = runner.invoke(cli, ["deductions", str(declarations_file)])

        assert result.exit_code == 0, result.output
        assert "emp-101" in result.output
        assert "1,032,000" in result.output

    def test_no_evidence_entries(self, runner, input_file, isolated_config):
        result = runner.invoke(cli, ["deductions", str(input_file)])

        assert result.exit_code == 1
        assert "No entries with 'evidence'" in result.output

    def test_strict_rejects_negative_evidence(self, runner, tmp_path, evidence_data, isolated_config):
        evidence_data["evidence"]["mutual_aid"] = {"ideco": -1}
        path = tmp_path / "negative.yaml"
        path.write_text(yaml.safe_dump(evidence_data))

        result = runner.invoke(cli, ["deductions", str(path), "--strict"])

        assert result.exit_code == 1
        assert "evidence.mutual_aid.ideco" in result.output


class TestUtilityCommands:

    def test_spouse_text(self, runner, isolated_config):
        result = runner.invoke(cli, ["spouse", "9600000", "0"])

        assert result.exit_code == 0, result.output
        assert "130,000" in result.output

    def test_spouse_json(self, runner, isolated_config):
        result = runner.invoke(cli, ["spouse", "9200000", "1000000", "--format", "json"])

        assert json.loads(result.output) == {
            "spouse_deduction": 0,
            "spouse_special_deduction": 118_800,
        }

    def test_spouse_elderly(self, runner, isolated_config):
        result = runner.invoke(cli, ["spouse", "5000000", "0", "--elderly", "--format", "json"])

        assert json.loads(result.output)["spouse_deduction"] == 480_000

    def test_dependents(self, runner, isolated_config):
        result = runner.invoke(cli, ["dependents", "--general", "1", "--format", "json"])

        payload = json.loads(result.output)
        assert payload["dependent_deduction"] == 380_000
        assert payload["counts"]["general"] == 1

    def test_dependents_strict(self, runner, isolated_config):
        result = runner.invoke(cli, ["dependents", "--elderly", "-1", "--strict"])

        assert result.exit_code == 1
        assert "dependents.elderly" in result.output

    def test_brackets(self, runner, isolated_config):
        result = runner.invoke(cli, ["brackets"])

        assert result.exit_code == 0, result.output
        assert "1,625,000" in result.output
        assert "4,796,000" in result.output


class TestSettingsCommands:

    def test_show_empty(self, runner, isolated_config):
        result = runner.invoke(cli, ["settings", "show"])

        assert result.exit_code == 0
        assert "No settings configured" in result.output

    def test_set_show_unset(self, runner, isolated_config):
        result = runner.invoke(cli, ["settings", "set", "default_output_format", "json"])
        assert result.exit_code == 0, result.output
        assert "Set default_output_format: json" in result.output

        result = runner.invoke(cli, ["settings", "show"])
        assert "default_output_format: json" in result.output

        result = runner.invoke(cli, ["settings", "unset", "default_output_format"])
        assert "Cleared default_output_format" in result.output

    def test_set_invalid_value(self, runner, isolated_config):
        result = runner.invoke(cli, ["settings", "set", "log_level", "loud"])

        assert result.exit_code == 1
        assert "Invalid value" in result.output
