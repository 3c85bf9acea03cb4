"""
Minimal smoke tests for calisthenics-planner CLI.

Tests basic functionality:
- App runs without errors
- Programs generate from options or a request file
- JSON output parses and saves
- Reference commands print
- Bad input exits with code 1
"""

import json
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from calisthenics_planner.cli.main import app
from calisthenics_planner.core.engine.config_loader import API_KEY_ENV
from calisthenics_planner.io.serializers import loads_program


runner = CliRunner()

INTERMEDIATE = [
    "--level", "intermediate",
    "--pull-ups", "12",
    "--dips", "15",
    "--push-ups", "30",
    "--squats", "40",
    "--leg-raises", "12",
    "--burpees", "20",
]


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def no_api_key(monkeypatch):
    """Keep every test offline."""
    monkeypatch.delenv(API_KEY_ENV, raising=False)


class TestCLISmoke:
    """Basic smoke tests for CLI commands."""

    def test_app_help(self):
        """Test that app runs and shows help."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "generate" in result.output
        assert "nutrition" in result.output

    def test_generate_table_output(self):
        """Test generate prints the weekly tables."""
        result = runner.invoke(app, ["generate", *INTERMEDIATE, "--weeks", "4"])
        assert result.exit_code == 0
        assert "Week 1" in result.output
        assert "Pull Day" in result.output
        assert "Nutrition" in result.output

    def test_generate_json(self):
        """Test generate --json emits a parseable program."""
        result = runner.invoke(
            app, ["generate", *INTERMEDIATE, "--goal", "build_muscle", "--json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["level"] == "intermediate"
        assert data["goals"] == ["build_muscle"]
        assert len(data["weeks"]) == 6
        assert data["coach_review"] is None

    def test_generate_output_file(self, temp_dir):
        """Test --output writes a program that loads back."""
        out = temp_dir / "program.json"
        result = runner.invoke(app, ["generate", *INTERMEDIATE, "--weeks", "12", "-o", str(out)])
        assert result.exit_code == 0
        assert out.exists()
        program = loads_program(out.read_text(encoding="utf-8"))
        assert len(program.weeks) == 12

    def test_generate_from_request_file(self, temp_dir):
        """Test a JSON request file is loaded and options override it."""
        request = temp_dir / "request.json"
        request.write_text(
            json.dumps(
                {
                    "level": "beginner",
                    "capability": {
                        "pull_ups": 2,
                        "dips": 3,
                        "push_ups": 8,
                        "squats": 15,
                        "leg_raises": 4,
                        "burpees": 10,
                        "muscle_ups": 4,
                    },
                    "goals": ["lose_weight"],
                    "height_cm": 170,
                    "weight_kg": 65,
                }
            )
        )
        result = runner.invoke(app, ["generate", "-r", str(request), "--weeks", "4", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["level"] == "beginner"
        assert data["capability"]["muscle_ups"] == 0
        assert len(data["weeks"]) == 4
        assert data["nutrition"]["total_energy"] is not None

    def test_generate_invalid_request(self):
        """Test missing capability values exit with an error."""
        result = runner.invoke(app, ["generate", "--level", "intermediate", "--pull-ups", "12"])
        assert result.exit_code == 1
        assert "Invalid request" in result.output

    def test_generate_bad_level(self):
        result = runner.invoke(app, ["generate", *INTERMEDIATE, "--level", "elite"])
        assert result.exit_code == 1

    def test_generate_missing_request_file(self, temp_dir):
        result = runner.invoke(app, ["generate", "-r", str(temp_dir / "missing.json")])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_generate_review_without_key_warns(self):
        """Test --review degrades to the plain program without an API key."""
        result = runner.invoke(app, ["generate", *INTERMEDIATE, "--weeks", "4", "--review"])
        assert result.exit_code == 0
        assert API_KEY_ENV in result.output
        assert "Week 4" in result.output

    def test_review_requires_key(self, temp_dir):
        out = temp_dir / "program.json"
        runner.invoke(app, ["generate", *INTERMEDIATE, "--weeks", "4", "-o", str(out)])
        result = runner.invoke(app, ["review", str(out)])
        assert result.exit_code == 1
        assert API_KEY_ENV in result.output

    def test_review_missing_program(self, temp_dir):
        result = runner.invoke(app, ["review", str(temp_dir / "nope.json")])
        assert result.exit_code == 1


class TestReferenceCommands:
    def test_nutrition_json(self):
        result = runner.invoke(
            app, ["nutrition", "--height-cm", "175", "--weight-kg", "70", "-g", "build_muscle", "--json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["total_energy"] == 2760
        assert data["protein_grams"] == 154

    def test_nutrition_training_days(self):
        result = runner.invoke(
            app, ["nutrition", "--height-cm", "175", "--weight-kg", "70", "--training-days", "4", "--json"]
        )
        assert result.exit_code == 0
        assert "(4 training days)" in json.loads(result.output)["note"]
        result = runner.invoke(app, ["nutrition", "--training-days", "3"])
        assert result.exit_code != 0

    def test_nutrition_insufficient_data(self):
        result = runner.invoke(app, ["nutrition"])
        assert result.exit_code == 0
        assert "Nutrition" in result.output

    def test_nutrition_bad_goal(self):
        result = runner.invoke(app, ["nutrition", "-g", "get_huge"])
        assert result.exit_code == 1

    def test_skills_json(self):
        result = runner.invoke(app, ["skills", "--pull-ups", "12", "--dips", "12", "--json"])
        assert result.exit_code == 0
        rows = {row["skill"]: row["unlocked"] for row in json.loads(result.output)}
        assert rows["muscle_up"] is True
        assert rows["back_lever"] is True
        assert rows["front_lever"] is False

    def test_skills_table(self):
        result = runner.invoke(app, ["skills", "--push-ups", "10"])
        assert result.exit_code == 0
        assert "handstand" in result.output

    def test_materials_json(self):
        result = runner.invoke(app, ["materials", "--json"])
        assert result.exit_code == 0
        items = json.loads(result.output)
        assert items[0]["name"] == "Jump rope"
